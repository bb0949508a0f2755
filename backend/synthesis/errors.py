"""HTTP error helpers shared by the routers."""

import logging

from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 5


def service_unavailable(message: str = "Service temporarily unavailable. Please try again.") -> HTTPException:
    """503 for upstream AI failures; the client shows the message with a retry button."""
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=message,
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


def not_found(message: str = "Not found.") -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)


def bad_request(message: str = "Invalid or missing input.") -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed input as 400 instead of FastAPI's default 422."""
    logger.info(f"Rejected malformed request to {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors(), custom_encoder={Exception: str})},
    )
