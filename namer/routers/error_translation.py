# /namer/routers/error_translation.py

import logging

from fastapi import HTTPException, status

from ..core.exceptions import (
    NamerError, NotFoundError, ForbiddenError, GoneError, InvalidTransitionError,
    StorageFailureError, ShareAccessError, LogoGenerationError, ExportGenerationError,
)

logger = logging.getLogger(__name__)

SHARE_ACCESS_STATUS = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "inactive": status.HTTP_410_GONE,
    "expired": status.HTTP_410_GONE,
    "invalid_password": status.HTTP_401_UNAUTHORIZED,
}


def to_http_exception(error: Exception) -> HTTPException:
    """Maps a service-layer exception onto the HTTP error the client should see."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, ForbiddenError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))
    if isinstance(error, GoneError):
        return HTTPException(status_code=status.HTTP_410_GONE, detail=str(error))
    if isinstance(error, ShareAccessError):
        return HTTPException(status_code=SHARE_ACCESS_STATUS.get(error.reason, 404), detail=str(error))
    if isinstance(error, (InvalidTransitionError, ValueError)):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(error))
    if isinstance(error, LogoGenerationError):
        headers = {"Retry-After": str(error.retry_after)} if error.retry_after else None
        return HTTPException(status_code=error.status_code, detail=str(error), headers=headers)
    if isinstance(error, ExportGenerationError):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
    if isinstance(error, StorageFailureError):
        logger.error("Storage failure: %s", error, exc_info=error)
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="A storage error occurred.")
    if not isinstance(error, NamerError):
        logger.error("Unexpected error: %s", error, exc_info=error)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An unexpected server error occurred.")
