"""JSON encoding of evaluated transactions, shared by the sinks and the API."""

import json
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def serialize_value(value: Any) -> Any:
    """Turn a field value into a JSON-compatible value.

    Decimals become strings so amounts keep their exact scale; enums
    collapse to their value and temporal types to ISO-8601.
    """
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def to_dict(record: Any) -> dict[str, Any]:
    """Flatten a record into a dict of serialized values.

    Parameters
    ----------
    record : Any
        A flat dataclass such as ``Transaction``, or an already decoded dict.

    Returns
    -------
    dict[str, Any]
        Field name to serialized value. Anything else is wrapped as
        ``{"value": str(record)}``.
    """
    if is_dataclass(record) and not isinstance(record, type):
        return {f.name: serialize_value(getattr(record, f.name)) for f in fields(record)}
    if isinstance(record, dict):
        return serialize_value(record)
    return {"value": str(record)}


def to_json(record: Any, indent: int | None = None) -> str:
    """Encode a record as a JSON document."""
    return json.dumps(to_dict(record), indent=indent, ensure_ascii=False, default=str)
