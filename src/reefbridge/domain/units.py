"""Decimal ↔ minor-unit conversion at the fixed 18-decimal scale."""

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext

from reefbridge.exceptions import InvalidAmountError

MINOR_UNIT_DECIMALS = 18
MAX_UINT256 = 2**256 - 1

# Enough digits for a uint256 (78) plus the fractional scale
_PRECISION = 120


def to_minor_units(amount: str | int | Decimal, decimals: int = MINOR_UNIT_DECIMALS) -> int:
    """Convert a human-readable quantity to integer minor units.

    Digits beyond the smallest unit are truncated toward zero, never rounded up.
    Floats are rejected: pass the decimal string instead.
    """
    if isinstance(amount, float) or isinstance(amount, bool):
        raise InvalidAmountError("amount must be a decimal string, int or Decimal", amount=repr(amount))

    try:
        value = Decimal(amount.strip()) if isinstance(amount, str) else Decimal(amount)
    except InvalidOperation:
        raise InvalidAmountError("amount is not a decimal number", amount=repr(amount)) from None

    if not value.is_finite():
        raise InvalidAmountError("amount must be finite", amount=str(amount))
    if value < 0:
        raise InvalidAmountError("amount must not be negative", amount=str(amount))

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        minor = int(value.scaleb(decimals).to_integral_value(rounding=ROUND_DOWN))

    if minor > MAX_UINT256:
        raise InvalidAmountError("amount exceeds uint256", amount=str(amount))
    return minor


def from_minor_units(value: int, decimals: int = MINOR_UNIT_DECIMALS) -> Decimal:
    """Convert integer minor units back to a display quantity (exact)."""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(value).scaleb(-decimals)


def format_units(value: int | None, decimals: int = MINOR_UNIT_DECIMALS) -> str:
    """Render minor units for console tables, e.g. 10500000000000000000 → '10.5'."""
    if value is None:
        return "-"
    text = format(from_minor_units(value, decimals), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
