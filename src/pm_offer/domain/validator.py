"""Pre-edit validation of an EditRequest against the open offer it targets.

Rules are checked in order and the first violation raises
InvalidEditRequestError (or InvalidPriceError for an unparseable price).
"""
from dataclasses import dataclass

from src.pm_common.enums import ActivationChange, EditType
from src.pm_common.errors import InvalidEditRequestError, InvalidPriceError
from src.pm_common.price import price_string_to_long
from src.pm_offer.domain.edit_types import EditScope, scope_of
from src.pm_offer.domain.models import EditRequest, OpenOffer


@dataclass(frozen=True)
class ValidatedEdit:
    edit_type: EditType
    scope: EditScope
    activation: ActivationChange


class EditOfferValidator:
    def __init__(self, open_offer: OpenOffer, request: EditRequest) -> None:
        self._open_offer = open_offer
        self._request = request

    def validate(self) -> ValidatedEdit:
        edit_type = self._validate_edit_type()
        scope = scope_of(edit_type)
        activation = self._validate_activation(edit_type)
        if scope.fixed_price:
            self._validate_price()
        if scope.market_price_margin:
            self._validate_market_price_margin()
        if scope.trigger_price:
            self._validate_trigger_price(scope)
        return ValidatedEdit(edit_type=edit_type, scope=scope, activation=activation)

    def _validate_edit_type(self) -> EditType:
        try:
            return EditType(self._request.edit_type)
        except ValueError:
            raise InvalidEditRequestError(
                f"'{self._request.edit_type}' is not a known edit type"
            ) from None

    def _validate_activation(self, edit_type: EditType) -> ActivationChange:
        try:
            activation = ActivationChange(self._request.activation)
        except ValueError:
            raise InvalidEditRequestError(
                f"'{self._request.activation}' is not a valid activation state,"
                " expected -1 (unchanged), 0 (disable) or 1 (enable)"
            ) from None
        if (
            edit_type == EditType.ACTIVATION_STATE_ONLY
            and activation == ActivationChange.UNSPECIFIED
        ):
            raise InvalidEditRequestError(
                f"no activation state change requested for offer {self._open_offer.id}"
            )
        return activation

    def _validate_price(self) -> None:
        code = self._open_offer.offer.currency_code
        if price_string_to_long(self._request.price, code) <= 0:
            raise InvalidPriceError(self._request.price)

    def _validate_market_price_margin(self) -> None:
        margin = self._request.market_price_margin
        if margin is not None and not (-100.0 < margin < 100.0):
            raise InvalidEditRequestError(
                f"{margin}% is not a valid market price margin"
            )

    def _validate_trigger_price(self, scope: EditScope) -> None:
        trigger_price = self._request.trigger_price
        if trigger_price < 0:
            raise InvalidEditRequestError(f"trigger price {trigger_price} cannot be negative")
        payload = self._open_offer.offer.payload
        # Margin edits switch a fixed price offer to market based pricing.
        switches_to_market = scope.market_price_margin or self._request.use_market_based_price
        if not payload.use_market_based_price and not switches_to_market:
            raise InvalidEditRequestError(
                f"cannot set a trigger price on fixed price offer {self._open_offer.id}"
            )
