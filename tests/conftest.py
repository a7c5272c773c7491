"""Shared test fixtures."""

# ruff: noqa: E402  -- API_PASSWORD must be set before config.settings is imported

import os

os.environ.setdefault("API_PASSWORD", "test-password")

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import create_app
from src.pm_common.enums import Direction, OfferState, OpenOfferState
from src.pm_offer.application.service import OfferServiceDeps
from src.pm_offer.domain.models import Offer, OfferPayload, OpenOffer, PaymentAccount
from src.pm_offer.infrastructure.memory import build_in_memory_deps

MY_FINGERPRINT = "my-fingerprint"
PEER_FINGERPRINT = "peer-fingerprint"
API_PASSWORD = os.environ["API_PASSWORD"]


def _make_payload(**kwargs: Any) -> OfferPayload:
    defaults: dict[str, Any] = dict(
        id="offer-1",
        date=datetime(2024, 5, 1, tzinfo=UTC),
        owner_fingerprint=PEER_FINGERPRINT,
        direction=Direction.BUY,
        base_currency_code="BTC",
        counter_currency_code="USD",
        price=500_000_000,  # 50000.0000 USD
        use_market_based_price=False,
        market_price_margin=0.0,
        amount=10_000_000,
        min_amount=5_000_000,
        payment_method_id="SEPA",
        maker_payment_account_id="acct-1",
        buyer_security_deposit=0.15,
        country_code="DE",
        accepted_country_codes=("DE", "AT"),
        bank_id="bank-7",
        accepted_bank_ids=("bank-7",),
    )
    defaults.update(kwargs)
    return OfferPayload(**defaults)


@pytest.fixture
def make_offer() -> Callable[..., Offer]:
    def _make(state: OfferState = OfferState.AVAILABLE, **kwargs: Any) -> Offer:
        return Offer(payload=_make_payload(**kwargs), state=state)

    return _make


@pytest.fixture
def make_open_offer(make_offer: Callable[..., Offer]) -> Callable[..., OpenOffer]:
    def _make(
        trigger_price: int = 0,
        state: OpenOfferState = OpenOfferState.AVAILABLE,
        **kwargs: Any,
    ) -> OpenOffer:
        kwargs.setdefault("owner_fingerprint", MY_FINGERPRINT)
        return OpenOffer(offer=make_offer(**kwargs), trigger_price=trigger_price, state=state)

    return _make


@pytest.fixture
def usd_account() -> PaymentAccount:
    return PaymentAccount(
        id="acct-usd",
        payment_method_id="SEPA",
        trade_currency_codes=("USD", "EUR"),
        country_code="DE",
        bank_id="bank-7",
    )


@pytest.fixture
def memory_deps(usd_account: PaymentAccount) -> OfferServiceDeps:
    return build_in_memory_deps(MY_FINGERPRINT, "1.7.0", [usd_account])


@pytest.fixture
async def client(memory_deps: OfferServiceDeps) -> AsyncClient:
    """Async HTTP client for a fresh in-memory node."""
    transport = ASGITransport(app=create_app(memory_deps))
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-Api-Password": API_PASSWORD},
    ) as ac:
        yield ac
