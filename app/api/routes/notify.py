import logging

from fastapi import APIRouter, Depends

from app.api.deps import get_notification_service
from app.api.errors import http_error
from app.core.errors import NotificationServiceError
from app.schemas.notification import NotificationOut, SendEmailRequest, SendSMSRequest
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter()

# Sending is simulated: the notification is stored, no email/SMS leaves the service.

@router.post("/email", response_model=NotificationOut)
def send_email(payload: SendEmailRequest, service: NotificationService = Depends(get_notification_service)):
    try:
        notification = service.send_email(payload)
    except NotificationServiceError as exc:
        raise http_error(exc, "Send email") from exc
    logger.info("Email sent notification_id=%s", notification.id)
    return notification


@router.post("/sms", response_model=NotificationOut)
def send_sms(payload: SendSMSRequest, service: NotificationService = Depends(get_notification_service)):
    try:
        notification = service.send_sms(payload)
    except NotificationServiceError as exc:
        raise http_error(exc, "Send SMS") from exc
    logger.info("SMS sent notification_id=%s", notification.id)
    return notification
