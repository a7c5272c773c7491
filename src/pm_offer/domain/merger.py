"""Build the replacement OfferPayload for an edit.

Only price, market price margin and the use-market-price flag may change.
Currency codes, payment method, account id and country/bank restrictions are
copied verbatim; the original payload is never mutated.
"""
import dataclasses
import logging

from src.pm_common.enums import EditType
from src.pm_common.price import exact_multiply, price_string_to_long
from src.pm_offer.domain.edit_types import scope_of
from src.pm_offer.domain.models import (
    EditRequest,
    MutableOfferPayloadFields,
    OfferPayload,
    OpenOffer,
)

logger = logging.getLogger(__name__)


def mutable_fields_for(
    open_offer: OpenOffer, edit_type: EditType, request: EditRequest
) -> MutableOfferPayloadFields:
    payload = open_offer.offer.payload
    scope = scope_of(edit_type)

    if scope.fixed_price:
        price = price_string_to_long(request.price, payload.currency_code)
    else:
        price = payload.price

    if scope.market_price_margin:
        margin = exact_multiply(request.market_price_margin or 0.0, 0.01)
        use_market_based_price = True
    elif scope.trigger_price:
        # Trigger-only edits keep the stored margin as is.
        margin = payload.market_price_margin
        use_market_based_price = payload.use_market_based_price or request.use_market_based_price
    elif scope.fixed_price:
        margin = 0.0
        use_market_based_price = False
    else:
        # Activation-only edits leave all pricing fields alone.
        margin = payload.market_price_margin
        use_market_based_price = payload.use_market_based_price

    return MutableOfferPayloadFields(
        price=price,
        market_price_margin=margin,
        use_market_based_price=use_market_based_price,
        base_currency_code=payload.base_currency_code,
        counter_currency_code=payload.counter_currency_code,
        payment_method_id=payload.payment_method_id,
        maker_payment_account_id=payload.maker_payment_account_id,
        country_code=payload.country_code,
        accepted_country_codes=payload.accepted_country_codes,
        bank_id=payload.bank_id,
        accepted_bank_ids=payload.accepted_bank_ids,
    )


def merge_offer_payload(
    open_offer: OpenOffer, edit_type: EditType, request: EditRequest
) -> OfferPayload:
    """Return a new payload for open_offer with the edit applied."""
    fields = mutable_fields_for(open_offer, edit_type, request)
    logger.info("Merging OfferPayload %s with %s", open_offer.id, fields)
    return dataclasses.replace(open_offer.offer.payload, **dataclasses.asdict(fields))
