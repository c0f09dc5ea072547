"""
Column transforms applied between decoded records and emitted rows
"""

import json
from datetime import datetime
from typing import Any, Optional

from .records import parse_timestamp, record_to_dict


def to_timestamp(value: Any) -> Optional[datetime]:
    """Normalise a timestamp field; null and empty string become None"""
    return parse_timestamp(value)


def to_json_text(value: Any) -> Optional[str]:
    """
    Re-encode a nested object or array as JSON text

    Args:
        value: Record, tuple of records, or raw JSON value

    Returns:
        JSON string, or None when the value itself is null
    """
    if value is None:
        return None
    return json.dumps(record_to_dict(value), sort_keys=False)
