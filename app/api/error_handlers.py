import logging
import traceback
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core import schemas
from app.core.config import settings
from app.core.errors import AppError
from app.core.responses import utc_timestamp

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "An unexpected error occurred"
PARAMETER_LOCATIONS = ("path", "query")


def error_response(
    request: Request,
    status_code: int,
    message: str,
    errors: Optional[List[Dict[str, Any]]] = None,
    details: Optional[str] = None,
    exc: Optional[BaseException] = None,
) -> JSONResponse:
    envelope = schemas.ErrorEnvelope(
        statusCode=status_code,
        message=message,
        timestamp=utc_timestamp(),
        path=request.url.path,
        errors=errors,
        details=details,
    )
    body = envelope.model_dump(exclude_none=True)

    # Stack traces never leave a production deployment
    if exc is not None and settings.is_development:
        body["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)

    level = logging.ERROR if status_code >= 500 else logging.WARNING
    logger.log(level, f"{request.method} {request.url.path} -> {status_code}: {message}")

    return JSONResponse(status_code=status_code, content=body)


def _field_name(loc) -> str:
    parts = [str(part) for part in loc[1:]] or [str(loc[0])]
    return ".".join(parts)


async def app_error_handler(request: Request, exc: AppError):
    return error_response(
        request,
        exc.status_code,
        exc.message,
        errors=getattr(exc, "errors", None),
        details=exc.details,
        exc=exc,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": _field_name(error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]

    # Malformed path/query parameters are a bad request, bad bodies are unprocessable
    if all(error["loc"][0] in PARAMETER_LOCATIONS for error in exc.errors()):
        first = exc.errors()[0]
        return error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            f"Invalid {first['loc'][-1]} parameter",
            errors=errors,
        )

    return error_response(
        request,
        422,
        "Validation failed",
        errors=errors,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Cannot {request.method} {request.url.path}"
    else:
        message = str(exc.detail)
    return error_response(request, exc.status_code, message)


async def unhandled_exception_handler(request: Request, exc: Exception):
    message = GENERIC_MESSAGE if settings.is_production else str(exc) or GENERIC_MESSAGE
    return error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, message, exc=exc
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
