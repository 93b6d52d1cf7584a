from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} inválido")
    return str(value).strip()


def require_range(value: Any, field_name: str, min_value: int, max_value: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} inválido")
    if number < min_value or number > max_value:
        raise ValidationError(f"{field_name} deve estar entre {min_value} e {max_value}")
    return number


def require_money(value: Any, field_name: str, *, allow_zero: bool = True) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} inválido")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(f"{field_name} deve ser positivo")
    return amount


def require_enum(value: Any, enum_cls: Type[E], field_name: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"{field_name} inválido")


def optional_enum(value: Any, enum_cls: Type[E], field_name: str) -> Optional[E]:
    if value in (None, ""):
        return None
    return require_enum(value, enum_cls, field_name)
