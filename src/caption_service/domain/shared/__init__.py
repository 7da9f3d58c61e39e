"""
Shared Domain

Cross-cutting domain concepts (exception hierarchy).
"""

from .exceptions import (
    DomainException,
    EmptyImageError,
    EngineFailedError,
    EngineTimeoutError,
    ErrorNotAvailableError,
    ImageMissingError,
    ImageTooLargeError,
    InfrastructureError,
    InvalidStatusTransitionError,
    NotFoundError,
    ProcessingError,
    ResultNotAvailableError,
    TaskNotFoundError,
    UnsupportedExtensionError,
    ValidationError,
)

__all__ = [
    "DomainException",
    "ValidationError",
    "UnsupportedExtensionError",
    "EmptyImageError",
    "ImageTooLargeError",
    "NotFoundError",
    "TaskNotFoundError",
    "ResultNotAvailableError",
    "ErrorNotAvailableError",
    "ProcessingError",
    "EngineFailedError",
    "EngineTimeoutError",
    "ImageMissingError",
    "InfrastructureError",
    "InvalidStatusTransitionError",
]
