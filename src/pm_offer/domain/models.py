"""Offer domain models: pure dataclasses, no framework dependency.

OfferPayload is the network-shared part of an offer and is frozen; edits build
a new payload via dataclasses.replace. Offer and OpenOffer carry local state.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from src.pm_common.currency import is_crypto_currency
from src.pm_common.enums import (
    ActivationChange,
    Direction,
    EditType,
    OfferState,
    OpenOfferState,
)
from src.pm_common.price import long_to_price_string, scale_to_long
from src.pm_offer.domain.collaborators import PriceFeedProtocol


@dataclass(frozen=True, order=True)
class Price:
    value: int  # scaled by the currency's precision
    currency_code: str

    def __str__(self) -> str:
        return long_to_price_string(self.value, self.currency_code)


@dataclass(frozen=True)
class OfferPayload:
    id: str
    date: datetime
    owner_fingerprint: str
    direction: Direction
    base_currency_code: str
    counter_currency_code: str
    price: int  # fixed price; 0 when market based
    use_market_based_price: bool
    market_price_margin: float  # fraction, 0.05 == 5%
    amount: int
    min_amount: int
    payment_method_id: str
    maker_payment_account_id: str
    buyer_security_deposit: float = 0.0
    country_code: str | None = None
    accepted_country_codes: tuple[str, ...] = ()
    bank_id: str | None = None
    accepted_bank_ids: tuple[str, ...] = ()

    @property
    def currency_code(self) -> str:
        """Non-BTC side of the market: counter for fiat, base for crypto."""
        if self.base_currency_code == "BTC":
            return self.counter_currency_code
        return self.base_currency_code


@dataclass(frozen=True)
class MutableOfferPayloadFields:
    """The only fields an edit may change, plus verbatim copies of the rest."""
    price: int
    market_price_margin: float
    use_market_based_price: bool
    base_currency_code: str
    counter_currency_code: str
    payment_method_id: str
    maker_payment_account_id: str
    country_code: str | None
    accepted_country_codes: tuple[str, ...]
    bank_id: str | None
    accepted_bank_ids: tuple[str, ...]


@dataclass
class Offer:
    payload: OfferPayload
    state: OfferState = OfferState.UNKNOWN
    error_message: str | None = None
    price_feed: PriceFeedProtocol | None = field(default=None, repr=False, compare=False)

    @property
    def id(self) -> str:
        return self.payload.id

    @property
    def direction(self) -> Direction:
        return self.payload.direction

    @property
    def currency_code(self) -> str:
        return self.payload.currency_code

    @property
    def owner_fingerprint(self) -> str:
        return self.payload.owner_fingerprint

    @property
    def price(self) -> Price | None:
        """Fixed price, or market price adjusted by the margin.

        None when the offer is market based and no feed price is available.
        """
        payload = self.payload
        code = payload.currency_code
        if not payload.use_market_based_price:
            return Price(payload.price, code)
        if self.price_feed is None:
            return None
        market_price = self.price_feed.get_market_price(code)
        if market_price is None:
            return None
        margin = Decimal(repr(payload.market_price_margin))
        # A crypto seller (fiat buyer) asks below market for a positive margin.
        if is_crypto_currency(code):
            below = payload.direction == Direction.SELL
        else:
            below = payload.direction == Direction.BUY
        factor = 1 - margin if below else 1 + margin
        return Price(scale_to_long(market_price * factor, code), code)


@dataclass
class OpenOffer:
    offer: Offer
    trigger_price: int = 0  # 0 disables the trigger
    state: OpenOfferState = OpenOfferState.AVAILABLE

    @property
    def id(self) -> str:
        return self.offer.id

    @property
    def is_deactivated(self) -> bool:
        return self.state == OpenOfferState.DEACTIVATED


@dataclass(frozen=True)
class PaymentAccount:
    id: str
    payment_method_id: str
    trade_currency_codes: tuple[str, ...]
    country_code: str | None = None
    bank_id: str | None = None


@dataclass(frozen=True)
class TakeabilityResult:
    valid: bool
    reason: str = ""


@dataclass(frozen=True)
class EditRequest:
    """Sparse edit of an open offer; which values matter depends on edit_type.

    market_price_margin is a percent (5.0 == 5%). None means "not sent": margin
    edits treat it as 0.0, trigger-only edits keep the offer's current margin.
    """
    edit_type: EditType | str
    price: str = ""
    market_price_margin: float | None = None
    trigger_price: int = 0
    activation: ActivationChange | int = ActivationChange.UNSPECIFIED
    use_market_based_price: bool = False
