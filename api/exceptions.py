"""
API exceptions and exception handlers.

Pipeline errors from core.exceptions are mapped to HTTP responses here so
routers can let them propagate. Response body:

    {"error": "<kind>", "detail": "<message>"}
"""

import functools
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from core.constants import ErrorMessages
from core.exceptions import ImageEncodeError, ImagePipelineError

logger = logging.getLogger(__name__)


class CropFlowException(Exception):
    """Base class for API level errors"""

    status_code = 500
    kind = "internal_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class CropNotFoundException(CropFlowException):
    """Stored crop does not exist"""

    status_code = 404
    kind = "crop_not_found"

    def __init__(self, crop_id: str):
        super().__init__(ErrorMessages.CROP_NOT_FOUND.format(crop_id=crop_id))
        self.crop_id = crop_id


class PayloadTooLargeException(CropFlowException):
    """Request image exceeds the configured size limit"""

    status_code = 413
    kind = "payload_too_large"

    def __init__(self, size_mb: float, limit_mb: float):
        super().__init__(ErrorMessages.PAYLOAD_TOO_LARGE.format(size_mb=size_mb, limit_mb=limit_mb))


def pipeline_status_code(exc: ImagePipelineError) -> int:
    """HTTP status for a pipeline error"""
    if isinstance(exc, ImageEncodeError) and not exc.unsupported_format:
        return 500
    return 400


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for API and pipeline exceptions"""

    @app.exception_handler(CropFlowException)
    async def crop_flow_exception_handler(request: Request, exc: CropFlowException):
        logger.warning(f"{exc.kind} on {request.url.path}: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code, content={"error": exc.kind, "detail": exc.detail}
        )

    @app.exception_handler(ImagePipelineError)
    async def pipeline_exception_handler(request: Request, exc: ImagePipelineError):
        status_code = pipeline_status_code(exc)
        if status_code >= 500:
            logger.error(f"{exc.kind} on {request.url.path}: {exc.message}", exc_info=exc)
        else:
            logger.warning(f"{exc.kind} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=status_code, content=exc.to_dict())


def safe_endpoint(func):
    """
    Convert unexpected exceptions raised by an endpoint into HTTP 500.

    HTTPException, API exceptions and pipeline errors pass through to their
    registered handlers.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (HTTPException, CropFlowException, ImagePipelineError):
            raise
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return wrapper
