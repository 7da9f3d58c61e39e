"""
API Schemas Package

Contains shared Pydantic models for API Layer.
"""

from caption_service.api.schemas.common import ErrorResponse

__all__ = ["ErrorResponse"]
