from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional
from uuid import UUID

from rentshop.core.errors import ValidationError

MONEY_PLACES = Decimal("0.01")


def as_uuid(value: Any, field: str) -> UUID:
    """Accepts UUIDs or their string form; anything else is a ValidationError on `field`."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise ValidationError(f"'{value}' is not a valid identifier.", field=field)


def as_money(value: Any, field: str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"'{value}' is not a valid amount.", field=field)
    if not amount.is_finite():
        raise ValidationError(f"'{value}' is not a valid amount.", field=field)
    if amount < 0:
        raise ValidationError("Amount must not be negative.", field=field)
    return amount.quantize(MONEY_PLACES)


def as_quantity(value: Any, field: str, minimum: int = 1) -> int:
    try:
        qty = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"'{value}' is not a valid quantity.", field=field)
    if qty != value and not isinstance(value, str):
        # fractional quantities
        raise ValidationError(f"'{value}' is not a whole quantity.", field=field)
    if qty < minimum:
        raise ValidationError(f"Quantity must be at least {minimum}.", field=field)
    return qty


def require_text(value: Optional[str], field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required.", field=field)
    return text


def today() -> date:
    return date.today()
