"""
E-mart - Shared Helpers
========================
Pure utility functions with NO database or module dependencies.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

from common.exceptions import InvalidArgumentError

CENT = Decimal("0.01")


def now_utc() -> datetime:
    """Returns current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def to_money(value) -> Decimal:
    """Round a numeric value to cents."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def require_quantity(value, allow_zero_or_less: bool = False) -> int:
    """
    Validate a cart quantity.
    Booleans and non-integral values are rejected; non-positive values are
    rejected unless `allow_zero_or_less` (used by update, where <= 0 removes).
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"Quantity must be an integer, got {value!r}.")
    if value <= 0 and not allow_zero_or_less:
        raise InvalidArgumentError("Quantity must be positive.")
    return value
