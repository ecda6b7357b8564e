from datetime import datetime

from fastapi import Request, status
from fastapi.responses import JSONResponse

from traincycle.core.exceptions import (
    BusinessRuleError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from traincycle.core.logging import get_logger

logger = get_logger(__name__)


ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    BusinessRuleError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ConflictError: status.HTTP_409_CONFLICT,
}


def status_for(exc: DomainError) -> int:
    """HTTP status of the nearest mapped base class; 500 when none is mapped."""
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_MAP:
            return ERROR_STATUS_MAP[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    request_id = getattr(request.state, "request_id", None)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("unmapped_domain_error", code=exc.code, request_id=request_id)
    else:
        logger.info("domain_error", code=exc.code, status=status_code, request_id=request_id)

    return JSONResponse(
        status_code=status_code,
        content={
            "data": None,
            "meta": {
                "request_id": request_id,
                "timestamp": datetime.utcnow().isoformat() + "Z",
            },
            "errors": [
                {
                    "code": exc.code,
                    "message": exc.message,
                    "details": exc.details,
                }
            ],
        },
    )
