# ecofinds/core/errors.py
"""
Domain errors and the handlers that render them as response envelopes.

Every failure leaves the API as:

    {"success": false, "message": "...", "error": "...", ...extra}

Services raise the subclasses below; anything else that escapes a handler
is reported as a 500 and logged with its traceback.
"""
import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ecofinds.core.config import get_settings

logger = logging.getLogger(__name__)


class AppError(HTTPException):
    """
    Base class for errors that map to a client-visible status.

    `extra` is merged into the envelope (e.g. availableQuantity).
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed"

    def __init__(
        self,
        detail: str | None = None,
        *,
        error: str | None = None,
        extra: dict[str, Any] | None = None,
    ):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
        )
        self.error = error
        self.extra = extra or {}


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation error"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"

    def __init__(self, detail: str | None = None, **kwargs):
        super().__init__(detail, **kwargs)
        self.headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(AppError):
    # Uniqueness violations keep the 400 the mobile client already handles.
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Resource already exists"


class PayloadTooLargeError(AppError):
    status_code = status.HTTP_413_CONTENT_TOO_LARGE
    default_detail = "Payload too large"


class InsufficientStockError(ValidationError):
    default_detail = "Not enough stock available"

    def __init__(self, available_quantity: int):
        super().__init__(extra={"availableQuantity": available_quantity})
        self.available_quantity = available_quantity


def _envelope(message: str, **fields: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    body.update({k: v for k, v in fields.items() if v is not None})
    return body


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    body = _envelope(str(exc.detail))
    if isinstance(exc, AppError):
        if exc.error:
            body["error"] = exc.error
        body.update(exc.extra)
    return JSONResponse(
        status_code=exc.status_code,
        content=body,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope("Validation error", errors=errors),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = str(exc) if get_settings().EXPOSE_ERROR_DETAILS else None
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope("Internal server error", error=error),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
