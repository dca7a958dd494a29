"""
Exception handlers rendering every error in the standard error envelope.
"""
from http import HTTPStatus
from typing import Any, List, Optional, Union

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.models.schemas.response import FieldError
from storefront.services.response_builder import ResponseBuilder
from storefront.utils.exceptions import (
    NotFoundException,
    ValidationException,
    field_errors_from_pydantic,
)
from storefront.utils.logging import get_logger
from storefront.utils.trace import TRACE_ID_HEADER, get_trace_id

logger = get_logger(__name__)

ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_422_UNPROCESSABLE_ENTITY: "UNPROCESSABLE_ENTITY",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "INTERNAL_SERVER_ERROR",
}

VALIDATION_HINT = "Check the details field for the invalid values"


def error_code(status_code: int) -> str:
    if status_code in ERROR_CODES:
        return ERROR_CODES[status_code]
    try:
        return HTTPStatus(status_code).phrase.upper().replace(" ", "_").replace("-", "_")
    except ValueError:
        return "ERROR"


def error_response(
    request: Request,
    code: str,
    message: str,
    status_code: int,
    details: Optional[Union[List[FieldError], str]] = None,
    hint: Optional[str] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    builder: ResponseBuilder = getattr(request.app.state, "response_builder", None) or ResponseBuilder()
    trace_id = getattr(request.state, "trace_id", None) or get_trace_id()
    body = builder.build_error_response(
        code,
        message,
        status_code,
        trace_id,
        str(request.url),
        details=details,
        hint=hint,
    )
    content: Any = jsonable_encoder(body.model_dump(by_alias=True, exclude_none=True))
    headers = {**(headers or {}), TRACE_ID_HEADER: trace_id}
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationException)
    async def validation_exception_handler(request: Request, exc: ValidationException):
        logger.warning(f"Validation failed on {request.method} {request.url.path}: {exc}")
        return error_response(
            request,
            "VALIDATION_ERROR",
            exc.detail,
            exc.status_code,
            details=exc.errors,
            hint=VALIDATION_HINT,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = field_errors_from_pydantic(exc.errors())
        logger.warning(f"Invalid request on {request.method} {request.url.path}: {len(errors)} error(s)")
        return error_response(
            request,
            "VALIDATION_ERROR",
            "Validation failed",
            status.HTTP_400_BAD_REQUEST,
            details=errors,
            hint=VALIDATION_HINT,
        )

    @app.exception_handler(NotFoundException)
    async def not_found_handler(request: Request, exc: NotFoundException):
        return error_response(request, "NOT_FOUND", exc.detail, exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(
            request,
            error_code(exc.status_code),
            str(exc.detail),
            exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
        return error_response(
            request,
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
