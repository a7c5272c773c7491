"""Currency catalog: fiat vs. crypto classification and price precision.

Prices are stored as integers scaled by 10**precision:
  - fiat:   4 decimal digits (smallest unit 0.0001)
  - crypto: 8 decimal digits (smallest unit 0.00000001)
"""

FIAT_SMALLEST_UNIT_EXPONENT = 4
CRYPTO_SMALLEST_UNIT_EXPONENT = 8

# ISO 4217 codes traded by the node. Any code outside this set is crypto.
FIAT_CURRENCY_CODES: frozenset[str] = frozenset({
    "AED", "ARS", "AUD", "BDT", "BGN", "BRL", "CAD", "CHF", "CLP", "CNY",
    "COP", "CRC", "CZK", "DKK", "EGP", "EUR", "GBP", "GEL", "GHS", "HKD",
    "HUF", "IDR", "ILS", "INR", "JPY", "KES", "KRW", "KZT", "LKR", "MAD",
    "MXN", "MYR", "NGN", "NOK", "NZD", "PEN", "PHP", "PKR", "PLN", "RON",
    "RSD", "RUB", "SAR", "SEK", "SGD", "THB", "TRY", "TWD", "TZS", "UAH",
    "UGX", "USD", "UYU", "VES", "VND", "XAF", "XOF", "ZAR",
})


def is_fiat_currency(currency_code: str) -> bool:
    return currency_code.upper() in FIAT_CURRENCY_CODES


def is_crypto_currency(currency_code: str) -> bool:
    return not is_fiat_currency(currency_code)


def precision_for(currency_code: str) -> int:
    """Number of decimal digits a price in this currency is scaled by."""
    if is_crypto_currency(currency_code):
        return CRYPTO_SMALLEST_UNIT_EXPONENT
    return FIAT_SMALLEST_UNIT_EXPONENT
