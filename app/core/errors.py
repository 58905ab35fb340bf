"""Domain errors raised by the repository and service layers.

The HTTP layer maps them to status codes in ``app.api.errors``.
"""


class NotificationServiceError(Exception):
    """Base class for every error this service raises on purpose."""

    message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class NotFoundError(NotificationServiceError):
    message = "Notification not found"


class InvalidRecipientError(NotificationServiceError):
    message = "Invalid recipient"


class InvalidRequestBodyError(NotificationServiceError):
    message = "Invalid request body"


class InvalidIdentityError(NotificationServiceError):
    message = "Invalid user identity"


class UnauthorizedError(NotificationServiceError):
    message = "Authentication required"


class StorageError(NotificationServiceError):
    message = "Storage failure"


class StorageUnavailableError(StorageError):
    message = "Database connection not available"


class StorageOperationFailedError(StorageError):
    message = "Database operation failed"
