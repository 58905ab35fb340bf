import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.api.deps import get_notification_service, get_request_identity
from app.api.errors import http_error
from app.core.errors import NotificationServiceError, UnauthorizedError
from app.schemas.notification import NotificationOut, UnreadCount
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[NotificationOut])
def list_notifications(
    service: NotificationService = Depends(get_notification_service),
    user_id: Optional[str] = Depends(get_request_identity),
):
    try:
        items = service.list_notifications(user_id)
    except NotificationServiceError as exc:
        raise http_error(exc, "List notifications") from exc
    logger.info("Notifications listed count=%d", len(items))
    return items


# Declared before /{notification_id} so "count" is not taken for an id
@router.get("/count", response_model=UnreadCount)
def unread_count(
    service: NotificationService = Depends(get_notification_service),
    user_id: Optional[str] = Depends(get_request_identity),
):
    """Unread notifications of the caller. Requires an identity (no silent default)."""
    if not user_id:
        raise http_error(UnauthorizedError("missing user_id in request context"), "Unread count")
    try:
        count = service.count_unread(user_id)
    except NotificationServiceError as exc:
        raise http_error(exc, "Unread count") from exc
    logger.info("Unread count retrieved user_id=%s count=%d", user_id, count)
    return {"count": count}


@router.get("/{notification_id}", response_model=NotificationOut)
def get_notification(notification_id: str, service: NotificationService = Depends(get_notification_service)):
    try:
        notification = service.get_notification(notification_id)
    except NotificationServiceError as exc:
        raise http_error(exc, "Get notification") from exc
    logger.info("Notification retrieved id=%s", notification_id)
    return notification


@router.patch("/{notification_id}", response_model=NotificationOut)
def mark_notification_read(notification_id: str, service: NotificationService = Depends(get_notification_service)):
    try:
        notification = service.mark_as_read(notification_id)
    except NotificationServiceError as exc:
        raise http_error(exc, "Mark notification as read") from exc
    logger.info("Notification marked as read id=%s", notification_id)
    return notification
