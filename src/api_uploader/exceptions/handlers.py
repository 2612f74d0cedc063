from fastapi import status, Request
from fastapi.responses import JSONResponse
from api_uploader.exceptions.exceptions import (
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    ResourceNotFoundError,
    OsException,
    TranscodingError,
    ProbeError,
    StorageError,
    PersistenceError,
)
from api_uploader.schema import ApiResponse
import logging

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse(success=False, message=message, error=error).model_dump()
    )


async def bad_request_handler(request: Request, exc: BadRequestError):
    logger.warning(f"Bad request on {request.url.path}: {str(exc)}")
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", str(exc))


async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    logger.warning(f"Unauthorized request on {request.url.path}: {str(exc)}")
    return _error_response(status.HTTP_401_UNAUTHORIZED, "Unauthorized", str(exc))


async def forbidden_handler(request: Request, exc: ForbiddenError):
    logger.warning(f"Forbidden request on {request.url.path}: {str(exc)}")
    return _error_response(status.HTTP_403_FORBIDDEN, "Forbidden", str(exc))


async def resource_not_found_handler(request: Request, exc: ResourceNotFoundError):
    logger.warning(f"Resource not found: {str(exc)}")
    return _error_response(status.HTTP_404_NOT_FOUND, "Resource not found", str(exc))


async def transcoding_error_handler(request: Request, exc: TranscodingError):
    logger.error(f"Transcoding error: {str(exc)}", exc_info=True)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Transcoding failed", str(exc))


async def probe_error_handler(request: Request, exc: ProbeError):
    logger.error(f"Probe error: {str(exc)}", exc_info=True)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Media probing failed", str(exc))


async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Storage error: {str(exc)}", exc_info=True)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Storage upload failed",
        "Failed to store the file. Please try again."
    )


async def os_exception_handler(request: Request, exc: OsException):
    logger.error(f"OS error: {str(exc)}", exc_info=True)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "System error",
        "An unexpected system error occurred."
    )


async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error(f"Persistence error: {str(exc)}", exc_info=True)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        "Couldn't update video"
    )


async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        "An unexpected error occurred. Please try again."
    )
