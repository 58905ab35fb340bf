from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

# Every persisted notification reports this status; nothing is queued or retried.
STATUS_SENT = "sent"


class NotificationOut(BaseModel):
    id: int
    type: str = ""
    title: str = ""
    message: str = ""
    status: str = STATUS_SENT
    read: bool = False
    created_at: Optional[datetime] = None


class NotificationCreate(BaseModel):
    title: Optional[str] = None
    message: Optional[str] = None
    type: Optional[str] = None


class SendEmailRequest(BaseModel):
    to: EmailStr
    subject: str = Field(min_length=1)
    body: str = Field(min_length=1)


class SendSMSRequest(BaseModel):
    to: str = Field(min_length=1)
    message: str = Field(min_length=1)


class UnreadCount(BaseModel):
    count: int


def coalesce_title_message(title: Optional[str], message: Optional[str]) -> tuple[str, str]:
    """Fill a blank title from the message and a blank message from the title.

    Storage allows either column to be NULL or empty on its own (older rows only
    carry a title); API consumers always get both.
    """
    title = title or ""
    message = message or ""
    if not title and message:
        title = message
    elif not message and title:
        message = title
    return title, message
