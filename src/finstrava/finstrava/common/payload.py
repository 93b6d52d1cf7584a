from __future__ import annotations

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Mapping, Optional


def clean_payload(data: Mapping[str, Any], *, allowed: Optional[Iterable[str]] = None) -> dict:
    """Drop unset fields (None or empty string) before an insert/update."""
    keys = set(allowed) if allowed is not None else None
    out: dict = {}
    for key, value in data.items():
        if keys is not None and key not in keys:
            continue
        if value is None or value == "":
            continue
        out[key] = value
    return out


def blank_to_none(data: Mapping[str, Any], *, allowed: Optional[Iterable[str]] = None) -> dict:
    """Keep explicit fields but store empty strings as NULL."""
    keys = set(allowed) if allowed is not None else None
    out: dict = {}
    for key, value in data.items():
        if keys is not None and key not in keys:
            continue
        out[key] = None if value == "" else value
    return out


def to_primitive(value: Any) -> Any:
    """Convert dataclasses, enums, dates and decimals into JSON-friendly values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_primitive(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Mapping):
        return {k: to_primitive(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_primitive(v) for v in value]
    return value
