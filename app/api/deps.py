import logging
from typing import Optional

from fastapi import Request

from app.services.auth_client import AuthServiceError
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def get_notification_service(request: Request) -> NotificationService:
    return request.app.state.notification_service


async def get_request_identity(request: Request) -> Optional[str]:
    """Resolve the caller's user id from the Authorization header.

    Missing or malformed headers and any identity-service failure fall back to the
    demo user when DEMO_IDENTITY_FALLBACK is on; otherwise the request carries no
    identity (None) and each endpoint applies its own policy.
    """
    settings = request.app.state.settings
    auth_client = request.app.state.auth_client
    fallback = str(settings.default_user_id) if settings.demo_identity_fallback else None

    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return fallback
    if len(auth_header) <= len(BEARER_PREFIX) or not auth_header.startswith(BEARER_PREFIX):
        logger.warning("Malformed Authorization header")
        return fallback
    if auth_client is None:
        logger.warning("AUTH_SERVICE_URL is not configured, cannot resolve bearer token")
        return fallback

    token = auth_header[len(BEARER_PREFIX):]
    try:
        user = await auth_client.get_me(token)
    except AuthServiceError as exc:
        logger.warning("Auth validation failed: %s", exc)
        return fallback
    return user.id
