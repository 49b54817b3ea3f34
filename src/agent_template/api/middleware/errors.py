"""
Exception handlers that turn errors into the JSON error envelope.

``AppError`` subclasses keep their own status and code. Request validation
failures become 400 ``VALIDATION_ERROR`` with one FieldError per field.
Anything else is left to the framework's default handler.
"""

import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from agent_template.api.middleware.request_id import REQUEST_ID_HEADER
from agent_template.api.schemas.errors import ErrorCode, ErrorDetail, ErrorResponse, FieldError
from agent_template.config.settings import Settings, get_settings
from agent_template.domain.exceptions import AppError
from agent_template.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please try again later."

# Friendlier messages for the most common pydantic error types
VALIDATION_MESSAGES: dict[str, str] = {
    "missing": "This field is required",
    "string_type": "Must be a valid string",
    "int_type": "Must be a valid integer",
    "int_parsing": "Must be a valid integer",
    "float_type": "Must be a valid number",
    "float_parsing": "Must be a valid number",
    "bool_type": "Must be true or false",
    "list_type": "Must be a list",
    "dict_type": "Must be an object",
}


def _get_request_id(request: Request) -> str:
    # Set by RequestIDMiddleware; apps mounted without it still get an ID
    request_id = getattr(request.state, "request_id", None)
    return request_id or request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())


def _create_error_response(
    status_code: int,
    error_code: ErrorCode,
    message: str,
    request_id: str,
    *,
    details: Optional[list[FieldError]] = None,
    context: Optional[dict[str, Any]] = None,
    suggested_action: Optional[str] = None,
    is_production: bool = False,
) -> JSONResponse:
    """Build the error envelope. In production 5xx bodies carry no internals."""
    if is_production and status_code >= 500:
        message = INTERNAL_ERROR_MESSAGE
        context = None

    body = ErrorResponse(
        error=ErrorDetail(code=error_code, message=message, details=details, context=context),
        request_id=request_id,
        suggested_action=suggested_action or None,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


def _log_error(request: Request, error: AppError, request_id: str) -> None:
    log = logger.bind(
        request_id=request_id,
        path=request.url.path,
        method=request.method,
        status_code=error.status_code,
        error_code=error.error_code.value,
    )
    if error.status_code >= 500:
        log.error("Server error", error=error.message, details=error.details)
    else:
        log.info("Client error", error=error.message)


def _field_errors(exc: RequestValidationError) -> list[FieldError]:
    field_errors = []
    for error in exc.errors():
        error_type = error.get("type", "")
        field_errors.append(
            FieldError(
                field=".".join(str(loc) for loc in error.get("loc", [])),
                message=VALIDATION_MESSAGES.get(error_type, error.get("msg", "Validation error")),
                code=error_type.upper().replace(".", "_"),
                value=error.get("input"),
            )
        )
    return field_errors


def register_error_handlers(app: FastAPI, settings: Optional[Settings] = None) -> None:
    """
    Register error handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
        settings: Settings to read ``is_production`` from (defaults to get_settings())
    """
    settings = settings or get_settings()

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        request_id = _get_request_id(request)
        _log_error(request, exc, request_id)

        return _create_error_response(
            error_code=exc.error_code,
            message=exc.message,
            request_id=request_id,
            status_code=exc.status_code,
            context=exc.details if exc.details else None,
            suggested_action=exc.suggested_action,
            is_production=settings.is_production,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Convert request validation failures to 400 with field-level errors."""
        request_id = _get_request_id(request)
        field_errors = _field_errors(exc)

        logger.info(
            "Validation error",
            request_id=request_id,
            path=request.url.path,
            method=request.method,
            field_count=len(field_errors),
        )

        return _create_error_response(
            error_code=ErrorCode.VALIDATION_ERROR,
            message="Request validation failed",
            request_id=request_id,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=field_errors,
            suggested_action="Please check your input and ensure all required fields are provided correctly",
            is_production=settings.is_production,
        )
