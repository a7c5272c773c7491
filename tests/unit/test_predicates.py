"""Tests for offer predicates and price ordering."""
from decimal import Decimal
from unittest.mock import MagicMock

from src.pm_common.enums import Direction
from src.pm_offer.domain.models import OpenOffer, TakeabilityResult
from src.pm_offer.domain.predicates import (
    check_takeable,
    is_my_offer,
    is_takeable,
    matches_direction_and_currency,
    sort_by_price,
)
from src.pm_offer.infrastructure.memory import StaticPriceFeed


class TestOwnership:
    def test_same_fingerprint_is_mine(self, make_offer) -> None:
        assert is_my_offer(make_offer(owner_fingerprint="abc"), "abc") is True

    def test_other_fingerprint_is_not_mine(self, make_offer) -> None:
        assert is_my_offer(make_offer(owner_fingerprint="abc"), "xyz") is False


class TestDirectionAndCurrency:
    def test_case_insensitive_match(self, make_offer) -> None:
        offer = make_offer(direction=Direction.SELL, counter_currency_code="USD")
        assert matches_direction_and_currency(offer, "sell", "usd") is True

    def test_direction_mismatch(self, make_offer) -> None:
        offer = make_offer(direction=Direction.SELL)
        assert matches_direction_and_currency(offer, "BUY", "USD") is False

    def test_currency_mismatch(self, make_offer) -> None:
        offer = make_offer(counter_currency_code="EUR")
        assert matches_direction_and_currency(offer, "BUY", "USD") is False


class TestTakeability:
    def test_reason_is_preserved(self, make_offer) -> None:
        takeability = MagicMock()
        takeability.can_take.return_value = TakeabilityResult(False, "payment method is banned")

        result = check_takeable(make_offer(), takeability, True)

        assert result.valid is False
        assert result.reason == "payment method is banned"
        takeability.can_take.assert_called_once()

    def test_is_takeable_delegates(self, make_offer) -> None:
        takeability = MagicMock()
        takeability.can_take.return_value = TakeabilityResult(True)
        offer = make_offer()

        assert is_takeable(offer, takeability, False) is True
        takeability.can_take.assert_called_once_with(offer, False)


class TestSortByPrice:
    def test_buy_sorts_ascending(self, make_offer) -> None:
        offers = [make_offer(id=f"o{p}", price=p) for p in (300, 100, 200)]
        assert [o.id for o in sort_by_price(offers, "BUY")] == ["o100", "o200", "o300"]

    def test_sell_sorts_descending(self, make_offer) -> None:
        offers = [make_offer(id=f"o{p}", price=p) for p in (300, 100, 200)]
        assert [o.id for o in sort_by_price(offers, "sell")] == ["o300", "o200", "o100"]

    def test_open_offers_sorted_by_wrapped_offer(self, make_open_offer) -> None:
        open_offers = [make_open_offer(id=f"o{p}", price=p) for p in (2, 3, 1)]
        result = sort_by_price(open_offers, "BUY")
        assert all(isinstance(o, OpenOffer) for o in result)
        assert [o.id for o in result] == ["o1", "o2", "o3"]

    def test_unpriced_offers_listed_last(self, make_offer) -> None:
        unpriced = make_offer(id="mkt", price=0, use_market_based_price=True)
        offers = [unpriced, make_offer(id="a", price=5), make_offer(id="b", price=9)]
        assert [o.id for o in sort_by_price(offers, "SELL")] == ["b", "a", "mkt"]
        assert [o.id for o in sort_by_price(offers, "BUY")] == ["a", "b", "mkt"]

    def test_market_based_offer_sorted_by_feed_price(self, make_offer) -> None:
        feed = StaticPriceFeed({"USD": Decimal("50000")})
        market = make_offer(id="mkt", price=0, use_market_based_price=True, market_price_margin=0.0)
        market.price_feed = feed
        cheap = make_offer(id="cheap", price=400_000_000)
        dear = make_offer(id="dear", price=600_000_000)
        result = sort_by_price([dear, market, cheap], "BUY")
        assert [o.id for o in result] == ["cheap", "mkt", "dear"]
