from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def success_response(
    request: Request,
    data: Any,
    status_code: int = status.HTTP_200_OK,
    message: Optional[str] = None,
) -> JSONResponse:
    """Wrap a result in the success envelope: status, data, timestamp, path."""
    body = {
        "status": "success",
        "data": jsonable_encoder(data),
        "timestamp": utc_timestamp(),
        "path": request.url.path,
    }
    if message:
        body["message"] = message
    return JSONResponse(content=body, status_code=status_code)


def created_response(request: Request, data: Any) -> JSONResponse:
    return success_response(
        request, data, status.HTTP_201_CREATED, "Resource created successfully"
    )


def updated_response(request: Request, data: Any) -> JSONResponse:
    return success_response(
        request, data, status.HTTP_200_OK, "Resource updated successfully"
    )
