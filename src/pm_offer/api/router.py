# src/pm_offer/api/router.py
"""Offer REST API. All endpoints require the X-Api-Password header."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_offer_service, require_api_password
from src.pm_offer.application.schemas import (
    CancelOfferResponse,
    CreateOfferRequest,
    EditOfferRequest,
    OfferListResponse,
    OfferResponse,
)
from src.pm_offer.application.service import CreateOfferParams, OfferLifecycleService
from src.pm_offer.domain.models import EditRequest

router = APIRouter(
    prefix="/offers", tags=["offers"], dependencies=[Depends(require_api_password)]
)

Service = Annotated[OfferLifecycleService, Depends(get_offer_service)]


@router.get("")
async def list_offers(
    svc: Service,
    request: Request,
    direction: str = Query(..., description="BUY or SELL"),
    currency_code: str = Query(..., description="Counter currency code, e.g. USD"),
) -> ApiResponse:
    offers = svc.get_offers(direction, currency_code)
    data = OfferListResponse(items=[OfferResponse.from_offer(o) for o in offers])
    return success_response(data.model_dump(), request)


@router.get("/mine")
async def list_my_offers(
    svc: Service,
    request: Request,
    direction: str = Query(..., description="BUY or SELL"),
    currency_code: str = Query(..., description="Counter currency code, e.g. USD"),
) -> ApiResponse:
    open_offers = svc.get_my_offers(direction, currency_code)
    data = OfferListResponse(items=[OfferResponse.from_open_offer(o) for o in open_offers])
    return success_response(data.model_dump(), request)


@router.get("/mine/{offer_id}")
async def get_my_offer(offer_id: str, svc: Service, request: Request) -> ApiResponse:
    open_offer = svc.get_my_open_offer(offer_id)
    return success_response(OfferResponse.from_open_offer(open_offer).model_dump(), request)


@router.get("/{offer_id}")
async def get_offer(offer_id: str, svc: Service, request: Request) -> ApiResponse:
    offer = svc.get_offer(offer_id)
    return success_response(OfferResponse.from_offer(offer).model_dump(), request)


@router.post("", status_code=201)
async def create_offer(body: CreateOfferRequest, svc: Service, request: Request) -> ApiResponse:
    params = CreateOfferParams(**body.model_dump())
    offer = await svc.create_and_place_offer(params)
    return success_response(OfferResponse.from_offer(offer, is_my_offer=True).model_dump(), request)


@router.patch("/{offer_id}")
async def edit_offer(
    offer_id: str, body: EditOfferRequest, svc: Service, request: Request
) -> ApiResponse:
    edit = EditRequest(
        edit_type=body.edit_type,
        price=body.price,
        market_price_margin=body.market_price_margin,
        trigger_price=body.trigger_price,
        activation=body.enable,
        use_market_based_price=body.use_market_based_price,
    )
    await svc.edit_offer(offer_id, edit)
    open_offer = svc.get_my_open_offer(offer_id)
    return success_response(OfferResponse.from_open_offer(open_offer).model_dump(), request)


@router.post("/{offer_id}/cancel")
async def cancel_offer(offer_id: str, svc: Service, request: Request) -> ApiResponse:
    await svc.cancel_offer(offer_id)
    return success_response(CancelOfferResponse(offer_id=offer_id).model_dump(), request)
