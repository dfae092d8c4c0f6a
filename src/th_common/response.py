"""Unified API response envelope.

All API endpoints (except /health) return this format:
{
    "success": true,
    "code": 0,            // 0=success, non-0=error code
    "message": "...",     // optional on success
    "timestamp": "...",
    "request_id": "...",
    "user": { ... }       // payload keys sit at the top level
}
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ApiResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool = True
    code: int = 0
    message: str | None = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def success_response(message: str | None = None, **payload: Any) -> ApiResponse:
    return ApiResponse(success=True, code=0, message=message, **payload)


def error_response(code: int, message: str) -> ApiResponse:
    return ApiResponse(success=False, code=code, message=message)
