"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import PaymentAccountConfig, settings
from src.pm_common.errors import AppError
from src.pm_common.response import error_response
from src.pm_gateway.middleware.request_log import RequestLogMiddleware
from src.pm_offer.api.router import router as offer_router
from src.pm_offer.application.service import OfferLifecycleService, OfferServiceDeps
from src.pm_offer.domain.models import PaymentAccount
from src.pm_offer.infrastructure.memory import build_in_memory_deps

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def payment_accounts_from(configured: list[PaymentAccountConfig]) -> list[PaymentAccount]:
    return [
        PaymentAccount(
            id=a.id,
            payment_method_id=a.payment_method_id,
            trade_currency_codes=tuple(c.upper() for c in a.trade_currency_codes),
            country_code=a.country_code,
            bank_id=a.bank_id,
        )
        for a in configured
    ]


def create_app(deps: OfferServiceDeps | None = None) -> FastAPI:
    """Build the app around explicit collaborators.

    Defaults to an in-memory node holding the PAYMENT_ACCOUNTS from settings.
    """
    if deps is None:
        deps = build_in_memory_deps(
            settings.NODE_FINGERPRINT,
            settings.APP_VERSION,
            payment_accounts_from(settings.PAYMENT_ACCOUNTS),
        )

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, debug=settings.DEBUG)
    app.state.offer_service = OfferLifecycleService(deps)
    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        resp = error_response(exc.code, exc.message, request)
        return JSONResponse(status_code=exc.http_status, content=resp.model_dump())

    app.include_router(offer_router, prefix="/api/v1")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": settings.APP_VERSION}

    logger.info("%s %s ready for node %s", settings.APP_NAME, settings.APP_VERSION,
                deps.identity.local_fingerprint())
    return app


configure_logging()
app = create_app()
