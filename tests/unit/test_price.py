"""Tests for pm_common.price and pm_common.currency."""

import pytest

from src.pm_common.currency import is_crypto_currency, precision_for
from src.pm_common.errors import InvalidArgumentError, InvalidPriceError
from src.pm_common.price import exact_multiply, long_to_price_string, price_string_to_long


class TestCurrencyCatalog:
    def test_fiat_precision(self) -> None:
        assert precision_for("USD") == 4
        assert precision_for("eur") == 4

    def test_crypto_precision(self) -> None:
        assert precision_for("XMR") == 8
        assert precision_for("BTC") == 8

    def test_unknown_code_is_crypto(self) -> None:
        assert is_crypto_currency("BSQ") is True
        assert is_crypto_currency("USD") is False


class TestPriceStringToLong:
    def test_crypto_example(self) -> None:
        assert price_string_to_long("1234.5678", "XMR") == 123456780000

    def test_fiat_scaling(self) -> None:
        assert price_string_to_long("50000.1234", "USD") == 500001234

    def test_point_one_has_no_float_error(self) -> None:
        assert price_string_to_long("0.1", "USD") == 1000
        assert price_string_to_long("0.1", "XMR") == 10_000_000

    def test_rounds_half_away_from_zero(self) -> None:
        assert price_string_to_long("0.00005", "USD") == 1
        assert price_string_to_long("0.00015", "USD") == 2
        assert price_string_to_long("-0.00005", "USD") == -1

    def test_rounds_below_half_down(self) -> None:
        assert price_string_to_long("1.00004999", "USD") == 10000

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert price_string_to_long(" 12.5 ", "USD") == 125000

    @pytest.mark.parametrize("bad", ["", "abc", "1,5", "NaN", "Infinity", "12.3.4"])
    def test_malformed_raises(self, bad: str) -> None:
        with pytest.raises(InvalidPriceError):
            price_string_to_long(bad, "USD")

    def test_malformed_is_invalid_argument(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc:
            price_string_to_long("ten", "USD")
        assert exc.value.http_status == 400
        assert "ten" in exc.value.message


class TestLongToPriceString:
    def test_round_trip_crypto(self) -> None:
        value = price_string_to_long("1234.5678", "XMR")
        assert long_to_price_string(value, "XMR") == "1234.56780000"

    def test_round_trip_fiat(self) -> None:
        value = price_string_to_long("0.1", "USD")
        assert long_to_price_string(value, "USD") == "0.1000"

    def test_zero(self) -> None:
        assert long_to_price_string(0, "USD") == "0.0000"


class TestExactMultiply:
    def test_percent_to_fraction(self) -> None:
        assert exact_multiply(5.0, 0.01) == 0.05
        assert exact_multiply(-2.5, 0.01) == -0.025

    def test_zero(self) -> None:
        assert exact_multiply(0.0, 0.01) == 0.0
