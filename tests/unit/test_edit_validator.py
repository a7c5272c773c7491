"""Tests for EditOfferValidator."""
import pytest

from src.pm_common.enums import ActivationChange, EditType
from src.pm_common.errors import InvalidArgumentError, InvalidEditRequestError, InvalidPriceError
from src.pm_offer.domain.models import EditRequest
from src.pm_offer.domain.validator import EditOfferValidator


class TestEditType:
    def test_unknown_edit_type_rejected(self, make_open_offer) -> None:
        req = EditRequest(edit_type="PRICE_AND_EVERYTHING")
        with pytest.raises(InvalidEditRequestError, match="edit type"):
            EditOfferValidator(make_open_offer(), req).validate()

    def test_string_edit_type_normalized(self, make_open_offer) -> None:
        req = EditRequest(edit_type="FIXED_PRICE_ONLY", price="10")
        validated = EditOfferValidator(make_open_offer(), req).validate()
        assert validated.edit_type is EditType.FIXED_PRICE_ONLY


class TestActivation:
    @pytest.mark.parametrize("value", [-2, 2, 99])
    def test_out_of_range_rejected(self, make_open_offer, value: int) -> None:
        req = EditRequest(edit_type=EditType.FIXED_PRICE_ONLY, price="10", activation=value)
        with pytest.raises(InvalidEditRequestError, match="activation"):
            EditOfferValidator(make_open_offer(), req).validate()

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(-1, ActivationChange.UNSPECIFIED), (0, ActivationChange.DISABLE), (1, ActivationChange.ENABLE)],
    )
    def test_legal_values(self, make_open_offer, value: int, expected: ActivationChange) -> None:
        req = EditRequest(edit_type=EditType.FIXED_PRICE_ONLY, price="10", activation=value)
        assert EditOfferValidator(make_open_offer(), req).validate().activation is expected

    def test_activation_only_requires_a_change(self, make_open_offer) -> None:
        req = EditRequest(edit_type=EditType.ACTIVATION_STATE_ONLY)
        with pytest.raises(InvalidEditRequestError, match="no activation state change"):
            EditOfferValidator(make_open_offer(), req).validate()


class TestPrice:
    def test_unparseable_price_rejected(self, make_open_offer) -> None:
        req = EditRequest(edit_type=EditType.FIXED_PRICE_ONLY, price="cheap")
        with pytest.raises(InvalidPriceError):
            EditOfferValidator(make_open_offer(), req).validate()

    def test_non_positive_price_rejected(self, make_open_offer) -> None:
        req = EditRequest(edit_type=EditType.FIXED_PRICE_AND_ACTIVATION_STATE, price="0", activation=1)
        with pytest.raises(InvalidArgumentError):
            EditOfferValidator(make_open_offer(), req).validate()

    def test_price_ignored_when_not_editing_price(self, make_open_offer) -> None:
        open_offer = make_open_offer(use_market_based_price=True, price=0)
        req = EditRequest(edit_type=EditType.MKT_PRICE_MARGIN_ONLY, price="junk", market_price_margin=1.0)
        EditOfferValidator(open_offer, req).validate()


class TestMargin:
    @pytest.mark.parametrize("margin", [-100.0, 100.0, 250.0])
    def test_out_of_range_rejected(self, make_open_offer, margin: float) -> None:
        req = EditRequest(edit_type=EditType.MKT_PRICE_MARGIN_ONLY, market_price_margin=margin)
        with pytest.raises(InvalidEditRequestError, match="market price margin"):
            EditOfferValidator(make_open_offer(), req).validate()

    def test_missing_margin_accepted(self, make_open_offer) -> None:
        req = EditRequest(edit_type=EditType.MKT_PRICE_MARGIN_ONLY)
        assert EditOfferValidator(make_open_offer(), req).validate().scope.market_price_margin is True


class TestTriggerPrice:
    def test_negative_trigger_rejected(self, make_open_offer) -> None:
        open_offer = make_open_offer(use_market_based_price=True, price=0)
        req = EditRequest(edit_type=EditType.TRIGGER_PRICE_ONLY, trigger_price=-1)
        with pytest.raises(InvalidEditRequestError, match="negative"):
            EditOfferValidator(open_offer, req).validate()

    def test_trigger_on_fixed_price_offer_rejected(self, make_open_offer) -> None:
        req = EditRequest(edit_type=EditType.TRIGGER_PRICE_ONLY, trigger_price=100)
        with pytest.raises(InvalidEditRequestError, match="fixed price offer"):
            EditOfferValidator(make_open_offer(), req).validate()

    def test_trigger_allowed_when_switching_to_market_price(self, make_open_offer) -> None:
        req = EditRequest(
            edit_type=EditType.MKT_PRICE_MARGIN_AND_TRIGGER_PRICE,
            market_price_margin=1.0,
            trigger_price=100,
            use_market_based_price=True,
        )
        validated = EditOfferValidator(make_open_offer(), req).validate()
        assert validated.scope.trigger_price is True

    @pytest.mark.parametrize(
        "edit_type",
        [
            EditType.MKT_PRICE_MARGIN_AND_TRIGGER_PRICE,
            EditType.MKT_PRICE_MARGIN_AND_TRIGGER_PRICE_AND_ACTIVATION_STATE,
        ],
    )
    def test_margin_edit_moves_fixed_offer_to_market(self, make_open_offer, edit_type) -> None:
        req = EditRequest(
            edit_type=edit_type, market_price_margin=1.0, trigger_price=100, activation=1
        )
        validated = EditOfferValidator(make_open_offer(), req).validate()
        assert validated.scope.trigger_price is True

    def test_trigger_and_activation_on_fixed_offer_rejected(self, make_open_offer) -> None:
        req = EditRequest(
            edit_type=EditType.TRIGGER_PRICE_AND_ACTIVATION_STATE, trigger_price=100, activation=0
        )
        with pytest.raises(InvalidEditRequestError, match="fixed price offer"):
            EditOfferValidator(make_open_offer(), req).validate()
