"""Service errors and their mapping onto the response envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class QuotationError(Exception):
    status_code = 400

    def __init__(self, message: str, *, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error


class QuotationNotFoundError(QuotationError):
    status_code = 404

    def __init__(self, message: str = "Quotation not found") -> None:
        super().__init__(message)


class DuplicateQuotationNumberError(QuotationError):
    status_code = 400

    def __init__(self, quotation_number: str) -> None:
        super().__init__("Quotation number already exists. Please generate a new one.")
        self.quotation_number = quotation_number


class ServiceError(QuotationError):
    status_code = 500


def _envelope(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    body: dict = {"success": False, "message": message}
    if error:
        body["error"] = error
    return JSONResponse(status_code=status_code, content=body)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


async def _quotation_error_handler(request: Request, exc: QuotationError) -> JSONResponse:
    return _envelope(exc.status_code, exc.message, exc.error)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _envelope(400, "Invalid quotation data", _format_validation_errors(exc))


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope(500, "Internal server error", str(exc))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(QuotationError, _quotation_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
