import structlog
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from labreserve.core import exceptions as domain_exceptions

logger = structlog.get_logger(__name__)


def _http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    # Normalize to a consistent JSON body
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies are caller-fixable input errors, same class as missing fields
    return JSONResponse(status_code=400, content={"detail": "Invalid request"})


def _unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", exc_info=exc)
    # Hide internal details by default
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def _domain_error_handler(status_code: int, default_detail: str, headers: dict | None = None):
    def _handler(_: Request, exc: domain_exceptions.DomainError) -> JSONResponse:
        detail = str(exc) or default_detail
        return JSONResponse(status_code=status_code, content={"detail": detail}, headers=headers)

    return _handler


def _infrastructure_error_handler(_: Request, exc: domain_exceptions.InfrastructureError):
    logger.error("infrastructure_error", error=str(exc), cause=repr(exc.__cause__))
    # Never leak driver messages to clients
    return JSONResponse(status_code=500, content={"detail": "Server error"})


def install(app) -> None:
    # Register centralized exception handlers
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(
        domain_exceptions.ValidationError, _domain_error_handler(400, "Bad Request")
    )
    app.add_exception_handler(
        domain_exceptions.AuthenticationError,
        _domain_error_handler(401, "Unauthorized", headers={"WWW-Authenticate": "Bearer"}),
    )
    app.add_exception_handler(
        domain_exceptions.ForbiddenError, _domain_error_handler(403, "Forbidden")
    )
    app.add_exception_handler(
        domain_exceptions.NotFoundError, _domain_error_handler(404, "Not Found")
    )
    app.add_exception_handler(
        domain_exceptions.ConflictError, _domain_error_handler(409, "Conflict")
    )
    app.add_exception_handler(
        domain_exceptions.InfrastructureError, _infrastructure_error_handler
    )
    app.add_exception_handler(Exception, _unhandled_exception_handler)
