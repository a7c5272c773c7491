"""FastAPI dependencies: API password check and offer service lookup.

Usage in any protected router:
    from src.pm_gateway.auth.dependencies import get_offer_service, require_api_password

    router = APIRouter(dependencies=[Depends(require_api_password)])
"""

import hmac

from fastapi import Header, Request

from config.settings import settings
from src.pm_common.errors import InternalError, InvalidApiPasswordError
from src.pm_offer.application.service import OfferLifecycleService


async def require_api_password(
    password: str | None = Header(None, alias="X-Api-Password"),
) -> None:
    """Reject the call unless the X-Api-Password header matches settings."""
    if password is None or not hmac.compare_digest(
        password.encode(), settings.API_PASSWORD.encode()
    ):
        raise InvalidApiPasswordError()


def get_offer_service(request: Request) -> OfferLifecycleService:
    """The service instance the app was built with (see src.main.create_app)."""
    service: OfferLifecycleService | None = getattr(request.app.state, "offer_service", None)
    if service is None:
        raise InternalError("offer service is not configured")
    return service
