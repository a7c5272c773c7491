"""Pure offer predicates and direction-aware price ordering."""
from collections.abc import Iterable
from typing import TypeVar

from src.pm_common.enums import Direction
from src.pm_offer.domain.collaborators import TakeabilityProtocol
from src.pm_offer.domain.models import Offer, OpenOffer, TakeabilityResult

T = TypeVar("T", Offer, OpenOffer)


def is_my_offer(offer: Offer, local_fingerprint: str) -> bool:
    return offer.owner_fingerprint == local_fingerprint


def matches_direction_and_currency(offer: Offer, direction: str, currency_code: str) -> bool:
    """Case-insensitive match on direction name and counter currency code."""
    wanted_direction = offer.direction.value.lower() == direction.lower()
    wanted_currency = offer.payload.counter_currency_code.lower() == currency_code.lower()
    return wanted_direction and wanted_currency


def check_takeable(
    offer: Offer, takeability: TakeabilityProtocol, is_api_caller: bool
) -> TakeabilityResult:
    return takeability.can_take(offer, is_api_caller)


def is_takeable(offer: Offer, takeability: TakeabilityProtocol, is_api_caller: bool) -> bool:
    return check_takeable(offer, takeability, is_api_caller).valid


def _offer_of(item: Offer | OpenOffer) -> Offer:
    return item.offer if isinstance(item, OpenOffer) else item


def sort_by_price(items: Iterable[T], direction: str) -> list[T]:
    """BUY -> ascending price, SELL -> descending price.

    A buyer wants the cheapest offers first, a seller the highest. Offers with
    no resolvable price are listed last in either order.
    """
    ascending = direction.upper() == Direction.BUY.value
    priced: list[tuple[int, T]] = []
    unpriced: list[T] = []
    for item in items:
        price = _offer_of(item).price
        if price is None:
            unpriced.append(item)
        else:
            priced.append((price.value, item))
    priced.sort(key=lambda pair: pair[0], reverse=not ascending)
    return [item for _, item in priced] + unpriced
