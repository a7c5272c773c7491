# src/pm_offer/domain/collaborators.py
"""Protocols for the external collaborators the offer service drives.

The registry is callback based: command methods return immediately and later
invoke exactly one of on_success / on_error, possibly from another thread.
Snapshot methods return point-in-time copies that are safe to filter and sort.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from src.pm_common.enums import Direction, OpenOfferState
    from src.pm_offer.domain.models import (
        Offer,
        OpenOffer,
        PaymentAccount,
        Price,
        TakeabilityResult,
    )

SuccessHandler = Callable[[], None]
ErrorHandler = Callable[[str], None]


class OfferRegistryProtocol(Protocol):
    def snapshot_offers(self) -> Sequence[Offer]: ...

    def snapshot_open_offers(self) -> Sequence[OpenOffer]: ...

    def lookup_open_offer(self, offer_id: str) -> OpenOffer | None: ...

    def create_offer(
        self,
        offer_id: str,
        direction: Direction,
        currency_code: str,
        amount: int,
        min_amount: int,
        price: Price,
        tx_fee_override: int,
        use_market_based_price: bool,
        market_price_margin: float,
        buyer_security_deposit: float,
        payment_account: PaymentAccount,
    ) -> Offer: ...

    def place_offer(
        self,
        offer: Offer,
        buyer_security_deposit: float,
        use_savings_wallet: bool,
        trigger_price: int,
        on_success: Callable[[Any], None],
        on_error: ErrorHandler,
    ) -> None: ...

    def edit_start(
        self, open_offer: OpenOffer, on_success: SuccessHandler, on_error: ErrorHandler
    ) -> None: ...

    def edit_publish(
        self,
        edited_offer: Offer,
        trigger_price: int,
        new_state: OpenOfferState,
        on_success: SuccessHandler,
        on_error: ErrorHandler,
    ) -> None: ...

    def remove_offer(
        self, offer: Offer, on_success: SuccessHandler, on_error: ErrorHandler
    ) -> None: ...


class WalletGateProtocol(Protocol):
    def verify_wallets_available(self) -> None: ...

    def verify_wallet_unlocked(self) -> None: ...

    def set_fee_payment_currency_preference(self, currency_code: str) -> None: ...


class PaymentAccountStoreProtocol(Protocol):
    def lookup(self, payment_account_id: str) -> PaymentAccount | None: ...


class OfferCompatibilityProtocol(Protocol):
    def is_valid_for(self, offer: Offer, payment_account: PaymentAccount) -> bool: ...


class TakeabilityProtocol(Protocol):
    def can_take(self, offer: Offer, is_api_caller: bool) -> TakeabilityResult: ...


class IdentityContextProtocol(Protocol):
    def local_fingerprint(self) -> str: ...

    def is_api_caller(self) -> bool: ...


class PriceFeedProtocol(Protocol):
    def set_currency_code(self, currency_code: str) -> None: ...

    def get_market_price(self, currency_code: str) -> Decimal | None: ...
