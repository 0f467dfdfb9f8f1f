from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from pymongo.errors import PyMongoError

from registry.core.logging import get_logger

log = get_logger(__name__)


class AppError(Exception):
    """Base application error with consistent schema."""

    def __init__(
        self,
        message: str,
        code: str = "ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(AppError):
    def __init__(self, message: str = "Not found"):
        super().__init__(message, code="NOT_FOUND", status_code=status.HTTP_404_NOT_FOUND)


class ValidationFailure(AppError):
    """Payload broke one or more field rules.

    ``errors`` is a list of ``{"field", "rule", "message"}`` dicts, one per
    failing rule, and is exposed under ``details["errors"]``.
    """

    def __init__(self, errors: list[dict[str, str]], message: str | None = None):
        self.errors = errors
        if message is None:
            message = "; ".join(e["message"] for e in errors) or "Validation failed"
        super().__init__(
            message,
            code="VALIDATION_FAILED",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"errors": errors},
        )

    @classmethod
    def single(cls, field: str, rule: str, message: str) -> "ValidationFailure":
        return cls([{"field": field, "rule": rule, "message": message}])


class BackendError(AppError):
    def __init__(self, message: str = "Storage backend failure"):
        super().__init__(message, code="BACKEND_ERROR", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _body(request: Request, message: str, code: str, details: dict[str, Any]) -> dict[str, Any]:
    body: dict[str, Any] = {"message": message, "code": code, "details": details}
    if hasattr(request.state, "request_id"):
        body["request_id"] = request.state.request_id
    return body


def error_response(request: Request, exc: AppError) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=exc.status_code,
        content=_body(request, exc.message, exc.code, exc.details),
    )


async def app_exception_handler(request: Request, exc: AppError) -> ORJSONResponse:
    if exc.status_code >= 500:
        log.error("app_error", code=exc.code, message=exc.message)
    return error_response(request, exc)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_body(request, "Validation error", "VALIDATION_ERROR", {"errors": exc.errors()}),
    )


async def backend_exception_handler(request: Request, exc: PyMongoError) -> ORJSONResponse:
    log.exception("backend_failure", exc_info=exc)
    return error_response(request, BackendError())


async def generic_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    log.exception("unhandled_exception", exc_info=exc)
    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_body(request, "Internal server error", "INTERNAL_ERROR", {}),
    )
