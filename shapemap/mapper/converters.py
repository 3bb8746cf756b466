from __future__ import annotations
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List

Converter = Callable[[Any], Any]

_TRUE = {"true", "yes", "1", "on"}
_FALSE = {"false", "no", "0", "off"}


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ValueError(f"cannot interpret {value!r} as a boolean")


def to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


def to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).strip())


# Names usable as transform leaves in JSON mapping profiles
_CONVERTERS: Dict[str, Converter] = {
    "str": str,
    "int": int,
    "float": float,
    "decimal": lambda v: Decimal(str(v)),
    "bool": to_bool,
    "upper": lambda v: str(v).upper(),
    "lower": lambda v: str(v).lower(),
    "strip": lambda v: str(v).strip(),
    "date": to_date,
    "datetime": to_datetime,
}


def register_converter(name: str, fn: Converter) -> None:
    if not name:
        raise ValueError("converter name must be non-empty")
    if not callable(fn):
        raise ValueError(f"converter {name!r} must be callable")
    _CONVERTERS[name] = fn


def get_converter(name: str) -> Converter:
    try:
        return _CONVERTERS[name]
    except KeyError:
        known = ", ".join(list_converters())
        raise ValueError(f"Unknown converter: {name!r} (known: {known})") from None


def list_converters() -> List[str]:
    return sorted(_CONVERTERS)
