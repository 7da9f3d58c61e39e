"""
Domain Layer - Core Task Lifecycle

Framework-independent task model: entity, status state machine, queue message
and the exception hierarchy used by every other layer.

Usage:
    >>> from caption_service.domain import CaptionTask, TaskStatus, DomainException
"""

from .captioning import CaptionResult, CaptionTask, QueueMessage, TaskStatus
from .shared import DomainException

__all__ = [
    "CaptionTask",
    "CaptionResult",
    "QueueMessage",
    "TaskStatus",
    "DomainException",
]
