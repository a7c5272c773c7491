# src/pm_offer/infrastructure/memory.py
"""In-process collaborators for a single node (local dev, API tests).

InMemoryOfferRegistry keeps the network offer book and the local open offers
behind one lock. Snapshots are shallow copies taken under the lock; command
callbacks are invoked after the lock is released.
"""
import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from src.pm_common.currency import is_fiat_currency
from src.pm_common.enums import Direction, FeeCurrency, OfferState, OpenOfferState
from src.pm_common.errors import InvalidArgumentError, WalletLockedError, WalletUnavailableError
from src.pm_common.id_generator import OfferIdGenerator
from src.pm_offer.application.service import OfferServiceDeps
from src.pm_offer.domain.collaborators import (
    ErrorHandler,
    IdentityContextProtocol,
    OfferCompatibilityProtocol,
    PriceFeedProtocol,
    SuccessHandler,
)
from src.pm_offer.domain.models import (
    Offer,
    OfferPayload,
    OpenOffer,
    PaymentAccount,
    Price,
    TakeabilityResult,
)

logger = logging.getLogger(__name__)

BTC = "BTC"


class StaticIdentityContext:
    def __init__(self, fingerprint: str, api_caller: bool = True) -> None:
        self._fingerprint = fingerprint
        self._api_caller = api_caller

    def local_fingerprint(self) -> str:
        return self._fingerprint

    def is_api_caller(self) -> bool:
        return self._api_caller


class StaticPriceFeed:
    """Market prices set by hand; currency_code tracks the active market."""

    def __init__(self, prices: dict[str, Decimal] | None = None) -> None:
        self._prices = {k.upper(): v for k, v in (prices or {}).items()}
        self.currency_code: str | None = None

    def set_price(self, currency_code: str, price: Decimal) -> None:
        self._prices[currency_code.upper()] = price

    def set_currency_code(self, currency_code: str) -> None:
        self.currency_code = currency_code

    def get_market_price(self, currency_code: str) -> Decimal | None:
        return self._prices.get(currency_code.upper())


class InMemoryWalletGate:
    def __init__(self, available: bool = True, locked: bool = False) -> None:
        self.available = available
        self.locked = locked
        self.fee_currency = FeeCurrency.BTC

    def verify_wallets_available(self) -> None:
        if not self.available:
            raise WalletUnavailableError()

    def verify_wallet_unlocked(self) -> None:
        if self.locked:
            raise WalletLockedError()

    def set_fee_payment_currency_preference(self, currency_code: str) -> None:
        try:
            self.fee_currency = FeeCurrency(currency_code.upper())
        except ValueError:
            raise InvalidArgumentError(
                f"{currency_code} cannot be used to pay trade fees, use BTC or BSQ"
            ) from None


class InMemoryPaymentAccountStore:
    def __init__(self, accounts: Iterable[PaymentAccount] = ()) -> None:
        self._accounts = {a.id: a for a in accounts}

    def add(self, account: PaymentAccount) -> None:
        self._accounts[account.id] = account

    def lookup(self, payment_account_id: str) -> PaymentAccount | None:
        return self._accounts.get(payment_account_id)

    def all(self) -> list[PaymentAccount]:
        return list(self._accounts.values())


class CurrencyCompatibility:
    """Account is valid for an offer if method and trade currency match."""

    def is_valid_for(self, offer: Offer, payment_account: PaymentAccount) -> bool:
        payload = offer.payload
        if payment_account.payment_method_id != payload.payment_method_id:
            return False
        codes = {c.upper() for c in payment_account.trade_currency_codes}
        return payload.currency_code.upper() in codes


class OfferFilter:
    """Takeability rules applied to other users' offers."""

    def __init__(
        self,
        payment_accounts: InMemoryPaymentAccountStore,
        compatibility: OfferCompatibilityProtocol,
        banned_offer_ids: Iterable[str] = (),
        banned_currencies: Iterable[str] = (),
        banned_payment_methods: Iterable[str] = (),
        ignored_fingerprints: Iterable[str] = (),
    ) -> None:
        self._payment_accounts = payment_accounts
        self._compatibility = compatibility
        self.banned_offer_ids = set(banned_offer_ids)
        self.banned_currencies = {c.upper() for c in banned_currencies}
        self.banned_payment_methods = set(banned_payment_methods)
        self.ignored_fingerprints = set(ignored_fingerprints)

    def can_take(self, offer: Offer, is_api_caller: bool) -> TakeabilityResult:
        payload = offer.payload
        if offer.state != OfferState.AVAILABLE:
            return TakeabilityResult(False, "offer is not available")
        if payload.id in self.banned_offer_ids:
            return TakeabilityResult(False, "offer is banned")
        if payload.currency_code.upper() in self.banned_currencies:
            return TakeabilityResult(False, "currency is banned")
        if payload.payment_method_id in self.banned_payment_methods:
            return TakeabilityResult(False, "payment method is banned")
        if payload.owner_fingerprint in self.ignored_fingerprints:
            return TakeabilityResult(False, "offer owner is ignored")
        if not any(
            self._compatibility.is_valid_for(offer, a) for a in self._payment_accounts.all()
        ):
            return TakeabilityResult(False, "no payment account valid for offer")
        return TakeabilityResult(True)


class InMemoryOfferRegistry:
    def __init__(
        self, identity: IdentityContextProtocol, price_feed: PriceFeedProtocol | None = None
    ) -> None:
        self._identity = identity
        self._price_feed = price_feed
        self._lock = threading.Lock()
        self._offer_book: dict[str, Offer] = {}
        self._open_offers: dict[str, OpenOffer] = {}
        self._editing: set[str] = set()

    # -- snapshots --

    def snapshot_offers(self) -> Sequence[Offer]:
        with self._lock:
            return list(self._offer_book.values())

    def snapshot_open_offers(self) -> Sequence[OpenOffer]:
        with self._lock:
            return list(self._open_offers.values())

    def lookup_open_offer(self, offer_id: str) -> OpenOffer | None:
        with self._lock:
            return self._open_offers.get(offer_id)

    def add_network_offer(self, offer: Offer) -> None:
        """Store an offer received from a peer."""
        if offer.price_feed is None:
            offer.price_feed = self._price_feed
        with self._lock:
            self._offer_book[offer.id] = offer

    # -- commands --

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
    ) -> Offer:
        if is_fiat_currency(currency_code):
            base_currency_code, counter_currency_code = BTC, currency_code
        else:
            base_currency_code, counter_currency_code = currency_code, BTC
        payload = OfferPayload(
            id=offer_id,
            date=datetime.now(UTC),
            owner_fingerprint=self._identity.local_fingerprint(),
            direction=direction,
            base_currency_code=base_currency_code,
            counter_currency_code=counter_currency_code,
            price=0 if use_market_based_price else price.value,
            use_market_based_price=use_market_based_price,
            market_price_margin=market_price_margin if use_market_based_price else 0.0,
            amount=amount,
            min_amount=min_amount,
            payment_method_id=payment_account.payment_method_id,
            maker_payment_account_id=payment_account.id,
            buyer_security_deposit=buyer_security_deposit,
            country_code=payment_account.country_code,
            accepted_country_codes=(
                (payment_account.country_code,) if payment_account.country_code else ()
            ),
            bank_id=payment_account.bank_id,
            accepted_bank_ids=(payment_account.bank_id,) if payment_account.bank_id else (),
        )
        return Offer(payload=payload, price_feed=self._price_feed)

    def place_offer(
        self,
        offer: Offer,
        buyer_security_deposit: float,
        use_savings_wallet: bool,
        trigger_price: int,
        on_success: Callable[[Any], None],
        on_error: ErrorHandler,
    ) -> None:
        payload = offer.payload
        if payload.amount <= 0 or payload.min_amount > payload.amount:
            offer.error_message = (
                f"invalid amounts for offer {offer.id}: "
                f"amount={payload.amount} min_amount={payload.min_amount}"
            )
            on_error(offer.error_message)
            return
        with self._lock:
            if offer.id in self._open_offers:
                error = f"offer {offer.id} is already placed"
            else:
                error = None
                offer.state = OfferState.AVAILABLE
                self._open_offers[offer.id] = OpenOffer(offer=offer, trigger_price=trigger_price)
                self._offer_book[offer.id] = offer
        if error:
            on_error(error)
            return
        logger.info("Placed offer %s with trigger price %d", offer.id, trigger_price)
        on_success(f"fee-tx-{offer.id}")

    def edit_start(
        self, open_offer: OpenOffer, on_success: SuccessHandler, on_error: ErrorHandler
    ) -> None:
        with self._lock:
            if open_offer.id in self._editing:
                error = f"offer {open_offer.id} is already being edited"
            elif open_offer.id not in self._open_offers:
                error = f"open offer {open_offer.id} not found"
            else:
                error = None
                self._editing.add(open_offer.id)
                self._offer_book.pop(open_offer.id, None)
        if error:
            on_error(error)
            return
        on_success()

    def edit_publish(
        self,
        edited_offer: Offer,
        trigger_price: int,
        new_state: OpenOfferState,
        on_success: SuccessHandler,
        on_error: ErrorHandler,
    ) -> None:
        offer_id = edited_offer.id
        with self._lock:
            open_offer = self._open_offers.get(offer_id)
            if offer_id not in self._editing or open_offer is None:
                error = f"edit of offer {offer_id} was not started"
            else:
                error = None
                self._editing.discard(offer_id)
                open_offer.offer = edited_offer
                open_offer.trigger_price = trigger_price
                open_offer.state = new_state
                if new_state == OpenOfferState.AVAILABLE:
                    self._offer_book[offer_id] = edited_offer
        if error:
            on_error(error)
            return
        on_success()

    def remove_offer(self, offer: Offer, on_success: SuccessHandler, on_error: ErrorHandler) -> None:
        with self._lock:
            open_offer = self._open_offers.pop(offer.id, None)
            self._offer_book.pop(offer.id, None)
            self._editing.discard(offer.id)
        if open_offer is None:
            on_error(f"open offer {offer.id} not found")
            return
        logger.info("Removed offer %s", offer.id)
        open_offer.state = OpenOfferState.CANCELED
        offer.state = OfferState.REMOVED
        on_success()


def build_in_memory_deps(
    fingerprint: str, version: str, accounts: Iterable[PaymentAccount] = ()
) -> OfferServiceDeps:
    """OfferServiceDeps wired to a single in-memory node."""
    identity = StaticIdentityContext(fingerprint)
    price_feed = StaticPriceFeed()
    payment_accounts = InMemoryPaymentAccountStore(accounts)
    compatibility = CurrencyCompatibility()
    return OfferServiceDeps(
        registry=InMemoryOfferRegistry(identity, price_feed),
        wallet=InMemoryWalletGate(),
        payment_accounts=payment_accounts,
        compatibility=compatibility,
        takeability=OfferFilter(payment_accounts, compatibility),
        identity=identity,
        price_feed=price_feed,
        id_generator=OfferIdGenerator(version),
    )
