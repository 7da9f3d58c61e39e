"""
Captioning Subdomain

Task entity, lifecycle status and queue message for asynchronous image captioning.
"""

from .entities import CaptionTask
from .value_objects import CaptionResult, QueueMessage, TaskStatus, normalize_extension

__all__ = [
    "CaptionTask",
    "CaptionResult",
    "QueueMessage",
    "TaskStatus",
    "normalize_extension",
]
