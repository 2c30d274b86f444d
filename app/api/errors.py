"""
Error handling at the API boundary.

Services raise :class:`app.core.exceptions.DomainError`; these handlers
turn them into failed :class:`ActionResult` envelopes.  Missing
preconditions are ordinary failed results and keep HTTP 200.  Request
validation failures, storage errors and anything unexpected are wrapped
in the same envelope.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import (AuthenticationError, AuthorizationError, ConflictError, CycleStatsError,
                                 DomainError, NotFoundError, PreconditionError, ValidationError, )
from app.schemas.result import ActionResult

logger = logging.getLogger(__name__)

ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    PreconditionError: status.HTTP_200_OK,
    ConflictError: status.HTTP_409_CONFLICT,
    CycleStatsError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
}


def status_for(exc: DomainError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in ERROR_STATUS_MAP:
            return ERROR_STATUS_MAP[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _failure(status_code: int, code: str, message: str, details: dict | None = None,
             headers: dict | None = None) -> JSONResponse:
    body = ActionResult.fail(code, message, details)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("Unmapped domain error on %s: %s", request.url.path, exc.code)
    else:
        logger.info("%s %s -> %s (%s)", request.method, request.url.path, exc.code, status_code)

    headers = { "WWW-Authenticate": "Bearer" } if isinstance(exc, AuthenticationError) else None
    return _failure(status_code, exc.code, exc.message, exc.details or None, headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [{ "loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", ""),
                "type": error.get("type", "") } for error in exc.errors()]
    logger.info("%s %s -> invalid_request (%s error(s))", request.method, request.url.path, len(errors))
    return _failure(status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_request", "Request validation failed",
                    { "errors": errors })


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "storage_error", "The request could not be stored")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
