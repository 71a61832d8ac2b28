"""
Translate store errors into HTTP responses.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from tinyurl_app.exceptions import (
    CapacityExceededError,
    DuplicateEmailError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidInputError,
    NotFoundError,
    TinyURLError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

STATUS_CODES = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    DuplicateEmailError: status.HTTP_400_BAD_REQUEST,
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    CapacityExceededError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_code_for(exc: TinyURLError) -> int:
    """Status code for a store error (500 for unmapped subclasses)"""
    for error_class in type(exc).__mro__:
        if error_class in STATUS_CODES:
            return STATUS_CODES[error_class]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def tinyurl_error_handler(request: Request, exc: TinyURLError) -> JSONResponse:
    """Render a store error in the same shape as HTTPException"""
    status_code = status_code_for(exc)
    if status_code == status.HTTP_503_SERVICE_UNAVAILABLE:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TinyURLError, tinyurl_error_handler)
