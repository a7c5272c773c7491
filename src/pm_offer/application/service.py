# src/pm_offer/application/service.py
"""OfferLifecycleService: query, create/place, edit and cancel offers.

The service holds no mutable state. Reads filter and sort registry snapshots;
mutations are issued as registry commands whose callback completions are
awaited, so precondition failures and registry failures both surface to the
caller as AppError subclasses raised from the awaited call.
"""
import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from src.pm_common.enums import ActivationChange, Direction, OfferState, OpenOfferState
from src.pm_common.errors import (
    InvalidDirectionError,
    OfferNotFoundError,
    OfferPlacementError,
    PaymentAccountMismatchError,
    PaymentAccountNotFoundError,
    RegistryError,
)
from src.pm_common.id_generator import OfferIdGenerator
from src.pm_common.price import exact_multiply, price_string_to_long
from src.pm_offer.domain.collaborators import (
    IdentityContextProtocol,
    OfferCompatibilityProtocol,
    OfferRegistryProtocol,
    PaymentAccountStoreProtocol,
    PriceFeedProtocol,
    TakeabilityProtocol,
    WalletGateProtocol,
)
from src.pm_offer.domain.merger import merge_offer_payload
from src.pm_offer.domain.models import EditRequest, Offer, OpenOffer, Price
from src.pm_offer.domain.predicates import (
    check_takeable,
    is_my_offer,
    is_takeable,
    matches_direction_and_currency,
    sort_by_price,
)
from src.pm_offer.domain.validator import EditOfferValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfferServiceDeps:
    registry: OfferRegistryProtocol
    wallet: WalletGateProtocol
    payment_accounts: PaymentAccountStoreProtocol
    compatibility: OfferCompatibilityProtocol
    takeability: TakeabilityProtocol
    identity: IdentityContextProtocol
    price_feed: PriceFeedProtocol
    id_generator: OfferIdGenerator


@dataclass(frozen=True)
class CreateOfferParams:
    """Arguments of create_and_place_offer.

    market_price_margin is a percent (5.0 == 5%); price is a decimal string in
    the offer currency and may be empty for market based offers.
    """
    currency_code: str
    direction: str
    price: str
    use_market_based_price: bool
    market_price_margin: float
    amount: int
    min_amount: int
    buyer_security_deposit: float
    trigger_price: int
    payment_account_id: str
    maker_fee_currency_code: str = ""


def resolve_activation_state(
    current: OpenOfferState, change: ActivationChange
) -> OpenOfferState:
    """UNSPECIFIED keeps the current state; ENABLE/DISABLE always overwrite it."""
    if change == ActivationChange.UNSPECIFIED:
        return current
    if change == ActivationChange.ENABLE:
        return OpenOfferState.AVAILABLE
    return OpenOfferState.DEACTIVATED


def parse_direction(direction: str) -> Direction:
    try:
        return Direction(direction.upper())
    except (ValueError, AttributeError):
        raise InvalidDirectionError(str(direction)) from None


class _Completion:
    """One registry success/error callback pair bridged to an awaitable.

    Callbacks may fire on any thread; the future is completed on the loop
    that created it. Only the first completion counts.
    """

    def __init__(self, phase: str) -> None:
        self.phase = phase
        self._loop = asyncio.get_running_loop()
        self._future: asyncio.Future[Any] = self._loop.create_future()

    def on_success(self, result: Any = None) -> None:
        self._loop.call_soon_threadsafe(self._resolve, result)

    def on_error(self, message: str) -> None:
        self._loop.call_soon_threadsafe(self._reject, message)

    def _resolve(self, result: Any) -> None:
        if not self._future.done():
            self._future.set_result(result)

    def _reject(self, message: str) -> None:
        if not self._future.done():
            self._future.set_exception(RegistryError(self.phase, message))

    async def wait(self) -> Any:
        return await self._future


class OfferLifecycleService:
    def __init__(self, deps: OfferServiceDeps) -> None:
        self._deps = deps

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_offer(self, offer_id: str) -> Offer:
        """Someone else's offer with this id that the caller can take."""
        fingerprint = self._deps.identity.local_fingerprint()
        is_api_caller = self._deps.identity.is_api_caller()
        candidates = [
            o for o in self._deps.registry.snapshot_offers()
            if o.id == offer_id and not is_my_offer(o, fingerprint)
        ]
        takeable: list[Offer] = []
        reason: str | None = None
        for offer in candidates:
            result = check_takeable(offer, self._deps.takeability, is_api_caller)
            if result.valid:
                takeable.append(offer)
            else:
                reason = result.reason
        if len(takeable) != 1:
            if len(takeable) > 1:
                logger.warning("Registry holds %d takeable offers with id %s", len(takeable), offer_id)
            raise OfferNotFoundError(offer_id, reason if not takeable else None)
        return takeable[0]

    def get_my_offer(self, offer_id: str) -> OpenOffer:
        fingerprint = self._deps.identity.local_fingerprint()
        for open_offer in self._deps.registry.snapshot_open_offers():
            if open_offer.id == offer_id and is_my_offer(open_offer.offer, fingerprint):
                return open_offer
        raise OfferNotFoundError(offer_id)

    def get_my_open_offer(self, offer_id: str) -> OpenOffer:
        open_offer = self._deps.registry.lookup_open_offer(offer_id)
        fingerprint = self._deps.identity.local_fingerprint()
        if open_offer is None or not is_my_offer(open_offer.offer, fingerprint):
            raise OfferNotFoundError(offer_id)
        return open_offer

    def get_offers(self, direction: str, currency_code: str) -> list[Offer]:
        """Takeable offers of other users, best price for the caller first."""
        parse_direction(direction)
        fingerprint = self._deps.identity.local_fingerprint()
        is_api_caller = self._deps.identity.is_api_caller()
        offers = [
            o for o in self._deps.registry.snapshot_offers()
            if not is_my_offer(o, fingerprint)
            and matches_direction_and_currency(o, direction, currency_code)
            and is_takeable(o, self._deps.takeability, is_api_caller)
        ]
        return sort_by_price(offers, direction)

    def get_my_offers(self, direction: str, currency_code: str) -> list[OpenOffer]:
        """The caller's own open offers, takeable or not."""
        parse_direction(direction)
        fingerprint = self._deps.identity.local_fingerprint()
        open_offers = [
            o for o in self._deps.registry.snapshot_open_offers()
            if is_my_offer(o.offer, fingerprint)
            and matches_direction_and_currency(o.offer, direction, currency_code)
        ]
        return sort_by_price(open_offers, direction)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create_and_place_offer(
        self,
        params: CreateOfferParams,
        result_handler: Callable[[Offer], None] | None = None,
    ) -> Offer:
        deps = self._deps
        deps.wallet.verify_wallets_available()
        deps.wallet.verify_wallet_unlocked()
        if params.maker_fee_currency_code:
            deps.wallet.set_fee_payment_currency_preference(params.maker_fee_currency_code)

        payment_account = deps.payment_accounts.lookup(params.payment_account_id)
        if payment_account is None:
            raise PaymentAccountNotFoundError(params.payment_account_id)

        currency_code = params.currency_code.upper()
        direction = parse_direction(params.direction)
        if params.use_market_based_price and not params.price:
            price_value = 0
        else:
            price_value = price_string_to_long(params.price, currency_code)
        offer_id = deps.id_generator.next_id()
        offer = deps.registry.create_offer(
            offer_id,
            direction,
            currency_code,
            params.amount,
            params.min_amount,
            Price(price_value, currency_code),
            0,  # use the default tx fee
            params.use_market_based_price,
            exact_multiply(params.market_price_margin, 0.01),
            params.buyer_security_deposit,
            payment_account,
        )
        if not deps.compatibility.is_valid_for(offer, payment_account):
            raise PaymentAccountMismatchError(
                offer.payload.counter_currency_code, payment_account.id
            )

        # Funding from an external wallet is not supported.
        use_savings_wallet = True
        placed = _Completion("place offer")
        deps.registry.place_offer(
            offer,
            params.buyer_security_deposit,
            use_savings_wallet,
            params.trigger_price,
            placed.on_success,
            placed.on_error,
        )
        try:
            await placed.wait()
        except RegistryError as exc:
            logger.error("Placing offer %s failed: %s", offer_id, exc.detail)
            raise
        if offer.error_message is not None:
            raise OfferPlacementError(offer.error_message)

        logger.info("Placed %s %s offer %s", direction.value, currency_code, offer_id)
        if result_handler is not None:
            result_handler(offer)
        return offer

    async def edit_offer(self, offer_id: str, request: EditRequest) -> Offer:
        """Replace an open offer with an edited copy: start, then publish.

        Publish is issued only after start completes. A publish failure is
        raised but start is not rolled back; the old entry stays withdrawn.
        """
        open_offer = self.get_my_open_offer(offer_id)
        validated = EditOfferValidator(open_offer, request).validate()
        logger.info(
            "'editoffer' params OK for offerId=%s editType=%s price=%s"
            " useMarketBasedPrice=%s marketPriceMargin=%s triggerPrice=%s activation=%s",
            offer_id,
            validated.edit_type.value,
            request.price,
            request.use_market_based_price,
            request.market_price_margin,
            request.trigger_price,
            validated.activation.name,
        )
        new_state = resolve_activation_state(open_offer.state, validated.activation)
        edited_payload = merge_offer_payload(open_offer, validated.edit_type, request)

        if validated.scope.trigger_price:
            trigger_price = request.trigger_price
        elif edited_payload.use_market_based_price:
            trigger_price = open_offer.trigger_price
        else:
            trigger_price = 0

        price_feed = self._deps.price_feed
        price_feed.set_currency_code(open_offer.offer.payload.currency_code)
        edited_offer = Offer(payload=edited_payload, state=OfferState.AVAILABLE, price_feed=price_feed)

        registry = self._deps.registry
        started = _Completion("edit start")
        registry.edit_start(open_offer, started.on_success, started.on_error)
        try:
            await started.wait()
        except RegistryError as exc:
            logger.error("EditOpenOfferStart failed for offer %s: %s", offer_id, exc.detail)
            raise
        logger.info("EditOpenOfferStart: offer %s", offer_id)

        published = _Completion("edit publish")
        registry.edit_publish(
            edited_offer, trigger_price, new_state, published.on_success, published.on_error
        )
        try:
            await published.wait()
        except RegistryError as exc:
            logger.error(
                "EditOpenOfferPublish failed for offer %s after start completed: %s",
                offer_id,
                exc.detail,
            )
            raise
        logger.info("EditOpenOfferPublish: offer %s", offer_id)
        return edited_offer

    async def cancel_offer(self, offer_id: str) -> None:
        open_offer = self.get_my_offer(offer_id)
        removed = _Completion("remove offer")
        self._deps.registry.remove_offer(open_offer.offer, removed.on_success, removed.on_error)
        try:
            await removed.wait()
        except RegistryError as exc:
            logger.error("Removing offer %s failed: %s", offer_id, exc.detail)
            raise
        logger.info("Removed offer %s", offer_id)
