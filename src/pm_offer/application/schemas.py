# src/pm_offer/application/schemas.py
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from src.pm_common.enums import EditType
from src.pm_offer.domain.models import Offer, OpenOffer


class CreateOfferRequest(BaseModel):
    currency_code: str
    direction: str
    price: str = ""
    use_market_based_price: bool = False
    market_price_margin: float = 0.0
    amount: int = Field(gt=0)
    min_amount: int = Field(gt=0)
    buyer_security_deposit: float = 0.15
    trigger_price: int = Field(0, ge=0)
    payment_account_id: str
    maker_fee_currency_code: Literal["", "BTC", "BSQ", "btc", "bsq"] = ""

    @field_validator("currency_code", "payment_account_id")
    @classmethod
    def no_whitespace(cls, v: str) -> str:
        if not v or v != v.strip() or " " in v:
            raise ValueError("must be non-empty and must not contain whitespace")
        return v


class EditOfferRequest(BaseModel):
    edit_type: EditType
    price: str = ""
    use_market_based_price: bool = False
    market_price_margin: float | None = None
    trigger_price: int = 0
    # -1 = leave as is, 0 = deactivate, 1 = activate; other values rejected by the service
    enable: int = -1


class OfferResponse(BaseModel):
    id: str
    direction: str
    price: str | None
    use_market_based_price: bool
    market_price_margin: float
    amount: int
    min_amount: int
    base_currency_code: str
    counter_currency_code: str
    payment_method_id: str
    payment_account_id: str
    owner_fingerprint: str
    state: str
    date: int  # epoch millis
    trigger_price: int = 0
    is_activated: bool = True
    is_my_offer: bool = False

    @classmethod
    def from_offer(cls, offer: Offer, is_my_offer: bool = False) -> "OfferResponse":
        payload = offer.payload
        price = offer.price
        return cls(
            id=payload.id,
            direction=payload.direction.value,
            price=str(price) if price is not None else None,
            use_market_based_price=payload.use_market_based_price,
            market_price_margin=payload.market_price_margin * 100,
            amount=payload.amount,
            min_amount=payload.min_amount,
            base_currency_code=payload.base_currency_code,
            counter_currency_code=payload.counter_currency_code,
            payment_method_id=payload.payment_method_id,
            payment_account_id=payload.maker_payment_account_id,
            owner_fingerprint=payload.owner_fingerprint,
            state=offer.state.value,
            date=int(payload.date.timestamp() * 1000),
            is_my_offer=is_my_offer,
        )

    @classmethod
    def from_open_offer(cls, open_offer: OpenOffer) -> "OfferResponse":
        resp = cls.from_offer(open_offer.offer, is_my_offer=True)
        resp.trigger_price = open_offer.trigger_price
        resp.is_activated = not open_offer.is_deactivated
        return resp


class OfferListResponse(BaseModel):
    items: list[OfferResponse]


class CancelOfferResponse(BaseModel):
    offer_id: str
    status: str = "CANCELED"
