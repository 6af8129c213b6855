"""
Utility functions and helpers
"""

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from services.base_service import ServiceResult

def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with milliseconds and a trailing Z; naive values are taken as UTC"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")

def utc_timestamp() -> str:
    """Current UTC time in the envelope timestamp format"""
    return format_timestamp(datetime.now(timezone.utc))

def send_response(
    status_code: int,
    success: bool,
    message: str,
    data: Optional[Any] = None,
    headers: Optional[dict] = None
) -> JSONResponse:
    """Wrap a payload in the {success, message, data, timestamp} envelope"""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": success,
            "message": message,
            "data": jsonable_encoder(data),
            "timestamp": utc_timestamp(),
        },
        headers=headers,
    )

def send_result(result: ServiceResult) -> JSONResponse:
    """Serialize a ServiceResult into the response envelope"""
    return send_response(result.status_code, result.success, result.message, result.data)
