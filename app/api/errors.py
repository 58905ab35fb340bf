import logging

from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import (
    InvalidIdentityError,
    InvalidRecipientError,
    InvalidRequestBodyError,
    NotFoundError,
    NotificationServiceError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    ((InvalidRecipientError, InvalidRequestBodyError), status.HTTP_400_BAD_REQUEST),
    ((InvalidIdentityError, UnauthorizedError), status.HTTP_401_UNAUTHORIZED),
)


def status_for(exc: Exception) -> int:
    for error_types, code in STATUS_BY_ERROR:
        if isinstance(exc, error_types):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def http_error(exc: NotificationServiceError, action: str) -> HTTPException:
    """Log a service failure and turn it into the HTTPException to raise."""
    code = status_for(exc)
    if code >= 500:
        logger.error("%s failed: %s", action, exc, exc_info=exc.__cause__ is not None)
        return HTTPException(status_code=code, detail="Internal server error")
    logger.warning("%s failed: %s", action, exc)
    return HTTPException(status_code=code, detail=type(exc).message)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = InvalidRequestBodyError(f"{request.method} {request.url.path}: {len(exc.errors())} validation error(s)")
    logger.warning("%s", error)
    return JSONResponse(
        status_code=status_for(error),
        content={"detail": jsonable_encoder(exc.errors())},
    )
