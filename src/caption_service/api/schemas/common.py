"""
Common API Schemas

Shared Pydantic models used across all API routers.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """
    Standard error response model for all API errors.

    Provides consistent error structure across all endpoints.

    Attributes:
        code: Machine-readable error code (e.g., "TASK_NOT_FOUND", "UNSUPPORTED_EXTENSION")
        message: Human-readable error message
        details: Optional additional error context
    """

    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        default=None, description="Additional error context"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "code": "TASK_NOT_FOUND",
                "message": "No task with id 3fa85f64-5717-4562-b3fc-2c963f66afa6 found",
                "details": {"task_id": "3fa85f64-5717-4562-b3fc-2c963f66afa6"},
            }
        }
    )
