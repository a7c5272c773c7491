"""Exact conversions between decimal price strings and scaled integer prices.

All stored prices are int, scaled by the currency's precision. Decimal is used
only at the boundary; no binary float ever reaches a stored price.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from src.pm_common.currency import precision_for
from src.pm_common.errors import InvalidPriceError


def parse_decimal(value: str) -> Decimal:
    """Parse a user-supplied decimal string; raise InvalidPriceError on junk."""
    try:
        parsed = Decimal(value.strip())
    except (InvalidOperation, AttributeError):
        raise InvalidPriceError(str(value)) from None
    if not parsed.is_finite():
        raise InvalidPriceError(str(value))
    return parsed


def price_string_to_long(price: str, currency_code: str) -> int:
    """'1234.5678' BTC -> 123456780000; half-away-from-zero rounding.

    The value is scaled with exact decimal arithmetic before rounding so
    inputs such as '0.1' never pick up binary representation error.
    """
    return scale_to_long(parse_decimal(price), currency_code)


def long_to_price_string(value: int, currency_code: str) -> str:
    """Inverse of price_string_to_long at the currency's precision."""
    precision = precision_for(currency_code)
    return f"{Decimal(value).scaleb(-precision):.{precision}f}"


def exact_multiply(a: float, b: float) -> float:
    """Multiply two floats through their shortest decimal form.

    exact_multiply(5.0, 0.01) == 0.05, where 5.0 * 0.01 picks up binary error.
    """
    return float(Decimal(repr(a)) * Decimal(repr(b)))


def scale_to_long(value: Decimal, currency_code: str) -> int:
    """Scale an exact decimal amount to the currency's integer representation."""
    scaled = value.scaleb(precision_for(currency_code))
    return int(scaled.to_integral_value(rounding=ROUND_HALF_UP))
