from datetime import datetime

from fastapi import Request, status
from fastapi.responses import JSONResponse

from regain.core.exceptions import (
    DomainError,
    EmptyCandidateSet,
    InsufficientCandidates,
    LLMCallError,
    LoadFailure,
    NotFoundError,
    PersistenceFailure,
    SchemaViolation,
    ValidationError,
)


ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    LoadFailure: status.HTTP_422_UNPROCESSABLE_ENTITY,
    EmptyCandidateSet: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InsufficientCandidates: status.HTTP_422_UNPROCESSABLE_ENTITY,
    SchemaViolation: status.HTTP_502_BAD_GATEWAY,
    LLMCallError: status.HTTP_504_GATEWAY_TIMEOUT,
    PersistenceFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = ERROR_STATUS_MAP.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse(
        status_code=status_code,
        content={
            "data": None,
            "meta": {
                "request_id": getattr(request.state, "request_id", None),
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
