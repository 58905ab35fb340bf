from __future__ import annotations

import logging
import re
from typing import List, Optional

from app.core.errors import InvalidIdentityError, InvalidRecipientError, NotFoundError
from app.repositories.notification_repository import NotificationRepository
from app.schemas.notification import NotificationCreate, NotificationOut, SendEmailRequest, SendSMSRequest

logger = logging.getLogger(__name__)

# Recipient value used by callers to simulate a delivery rejection.
INVALID_RECIPIENT_SENTINEL = "invalid"

# ids and user_id are INTEGER columns
_INT_PATTERN = re.compile(r"[+-]?\d+")
INT_MIN, INT_MAX = -(2**31), 2**31 - 1


def parse_int(raw: Optional[str]) -> Optional[int]:
    """Parse a plain decimal integer that fits an INTEGER column, else None.

    Unlike int(), rejects surrounding whitespace, underscores and non-ASCII digits.
    """
    if not raw or not _INT_PATTERN.fullmatch(raw) or not raw.isascii():
        return None
    value = int(raw)
    if not INT_MIN <= value <= INT_MAX:
        return None
    return value


def resolve_permissive_identity(raw: Optional[str], default: int) -> int:
    """Parse a user id, falling back to ``default`` when it is empty or not a number.

    Used by the inbox listing. This is a demo convenience, not an access check.
    """
    user_id = parse_int(raw)
    if user_id is None:
        if raw:
            logger.debug("Unparsable user id %r, using default user %s", raw, default)
        return default
    return user_id


def resolve_strict_identity(raw: Optional[str]) -> int:
    """Parse a user id, rejecting empty, non-numeric or non-positive values."""
    if not raw:
        raise InvalidIdentityError("user id is required")
    user_id = parse_int(raw)
    if user_id is None or user_id <= 0:
        raise InvalidIdentityError(f"invalid user id {raw!r}")
    return user_id


def _parse_notification_id(raw: str) -> int:
    notification_id = parse_int(raw)
    if notification_id is None:
        raise NotFoundError(f"invalid notification id {raw!r}")
    return notification_id


class NotificationService:
    """Validation and orchestration on top of NotificationRepository. Holds no state."""

    def __init__(self, repository: NotificationRepository, default_user_id: int = 1) -> None:
        self.repository = repository
        # Send operations do not know the caller yet; every sent notification lands
        # in this placeholder user's inbox.
        self.default_user_id = default_user_id

    def send_email(self, request: SendEmailRequest) -> NotificationOut:
        recipient = str(request.to or "")
        if not recipient or recipient == INVALID_RECIPIENT_SENTINEL:
            raise InvalidRecipientError(f"send email to {recipient!r}: invalid recipient")
        notification = self.repository.create(
            NotificationCreate(title=request.subject, message=request.subject, type="email"),
            self.default_user_id,
        )
        logger.info("Email notification %s recorded for %s", notification.id, recipient)
        return notification

    def send_sms(self, request: SendSMSRequest) -> NotificationOut:
        notification = self.repository.create(
            NotificationCreate(title="SMS", message=request.message, type="sms"),
            self.default_user_id,
        )
        logger.info("SMS notification %s recorded for %s", notification.id, request.to)
        return notification

    def list_notifications(self, user_id: Optional[str]) -> List[NotificationOut]:
        uid = resolve_permissive_identity(user_id, self.default_user_id)
        return self.repository.list_by_user_id(uid)

    def get_notification(self, notification_id: str) -> NotificationOut:
        nid = _parse_notification_id(notification_id)
        notification = self.repository.find_by_id(nid)
        if notification is None:
            raise NotFoundError(f"get notification by id {notification_id!r}: not found")
        return notification

    def mark_as_read(self, notification_id: str) -> NotificationOut:
        nid = _parse_notification_id(notification_id)
        if not self.repository.mark_as_read(nid):
            raise NotFoundError(f"notification id {notification_id!r}: not found")
        # Separate round trip, not atomic with the update
        return self.get_notification(notification_id)

    def count_unread(self, user_id: Optional[str]) -> int:
        uid = resolve_strict_identity(user_id)
        return self.repository.count_unread_by_user_id(uid)
