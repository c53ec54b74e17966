"""
Error handling for the API

Every error leaves the API in the same envelope:

    {"error": {"code": "...", "message": "...", "details": {...}, "timestamp": "..."},
     "request_id": "..."}

Domain errors carry their own code and status; request validation, plain
HTTPExceptions (e.g. 503 while starting) and unexpected exceptions are
mapped onto the same shape by the handlers registered here.
"""

import uuid
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.schemas.error import ErrorResponse, ErrorDetail, ValidationErrorResponse
from managers.preset_store import PRESET_SLOTS
from utils.logger import get_logger
from models.enums import LogCategory

log = get_logger().for_category(LogCategory.API)

HTTP_ERROR_CODES = {
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_503_SERVICE_UNAVAILABLE: "SERVICE_UNAVAILABLE",
}


class DomainError(Exception):
    """Base class for errors the API reports with their own code"""

    def __init__(self, code: str, message: str, details: Optional[dict] = None, status_code: int = 400):
        self.code = code
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)


class PresetNotFoundError(DomainError):
    def __init__(self, slot: int):
        super().__init__(
            code="PRESET_NOT_FOUND",
            message=f"Preset slot {slot} is empty",
            details={"slot": slot},
            status_code=status.HTTP_404_NOT_FOUND
        )


class InvalidPresetSlotError(DomainError):
    def __init__(self, slot: int):
        super().__init__(
            code="INVALID_PRESET_SLOT",
            message=f"Preset slot {slot} does not exist",
            details={"slot": slot, "valid_slots": list(PRESET_SLOTS)},
            status_code=422
        )


class FrameClockUnavailableError(DomainError):
    def __init__(self):
        super().__init__(
            code="FRAME_CLOCK_UNAVAILABLE",
            message="No frame clock is driving the controls",
            status_code=status.HTTP_409_CONFLICT
        )


def _error_response(
    status_code: int,
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    validation_errors: Optional[List[Dict[str, Any]]] = None
) -> JSONResponse:
    request_id = str(uuid.uuid4())
    error = ErrorDetail(code=code, message=message, details=details)

    if validation_errors is not None:
        body = ValidationErrorResponse(error=error, validation_errors=validation_errors, request_id=request_id)
    else:
        body = ErrorResponse(error=error, request_id=request_id)

    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _field_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    # loc[0] is where the value came from ("body", "path", "query")
    return [
        {
            "field": ".".join(str(part) for part in error["loc"][1:]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI app"""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        field_errors = _field_errors(exc)
        log.warn("Request validation failed", path=request.url.path, errors=len(field_errors))
        return _error_response(
            422,
            "VALIDATION_ERROR",
            "Request validation failed",
            details={"error_count": len(field_errors)},
            validation_errors=field_errors
        )

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError):
        log.warn(f"{exc.code}: {exc.message}", path=request.url.path)
        return _error_response(exc.status_code, exc.code, exc.message, details=exc.details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
        if exc.status_code >= 500:
            log.warn(f"{code}: {exc.detail}", path=request.url.path)
        return _error_response(exc.status_code, code, str(exc.detail))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        log.error(f"Unexpected error: {type(exc).__name__}: {exc}", path=request.url.path)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred. Please try again."
        )
