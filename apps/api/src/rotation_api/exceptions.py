import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from rotation_scheduler import (
    ComputationTimeout,
    ConfigurationError,
    RotationSchedulerError,
    SchedulingInfeasible,
)

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: HTTPException):
    """Return routing and method errors in the same envelope as scheduling errors"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "error_code": getattr(exc, "error_code", None) or f"HTTP_{exc.status_code}",
            "path": request.url.path,
        },
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report which roster, slot or option entries failed to parse"""
    errors = []
    for error in exc.errors():
        # Drop the leading "body" so fields read like "slots -> 0"
        location = [str(loc) for loc in error["loc"] if loc != "body"]
        errors.append(
            {
                "field": " -> ".join(location),
                "message": error["msg"],
                "type": error["type"],
            }
        )

    logger.info(f"Rejected rotation request with {len(errors)} invalid fields")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Rotation request validation failed",
            "error_code": "VALIDATION_ERROR",
            "errors": errors,
            "path": request.url.path,
        },
    )


async def rotation_exception_handler(request: Request, exc: RotationSchedulerError):
    """Handle scheduling failures raised by the solver"""
    status_code = status.HTTP_400_BAD_REQUEST
    content = {
        "detail": exc.message,
        "error_code": exc.error_code,
        "path": request.url.path,
    }

    if isinstance(exc, ConfigurationError):
        status_code = status.HTTP_400_BAD_REQUEST
        content["field"] = exc.field
    elif isinstance(exc, SchedulingInfeasible):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        content["slot_index"] = exc.slot_index
        content["slot_date"] = exc.slot_date.isoformat() if exc.slot_date else None
    elif isinstance(exc, ComputationTimeout):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        content["steps"] = exc.steps
        content["elapsed_seconds"] = exc.elapsed_seconds
        content["reason"] = exc.reason

    logger.warning(f"Scheduling request failed ({exc.error_code}): {exc.message}")
    return JSONResponse(status_code=status_code, content=content)


async def general_exception_handler(request: Request, exc: Exception):
    """Hide unexpected failures behind a generic 500"""
    logger.error(f"Unexpected error: {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "error_code": "INTERNAL_ERROR",
            "path": request.url.path,
        },
    )
