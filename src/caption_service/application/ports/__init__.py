"""
Application Layer Ports (Interfaces)

Contains Protocol definitions for dependency inversion.
Infrastructure Layer implements these protocols.
"""

from caption_service.application.ports.caption_engine import CaptionEngineProtocol
from caption_service.application.ports.image_storage import ImageStorageProtocol
from caption_service.application.ports.status_store import TaskStatusStoreProtocol
from caption_service.application.ports.task_queue import TaskQueueProtocol

__all__ = [
    "CaptionEngineProtocol",
    "ImageStorageProtocol",
    "TaskStatusStoreProtocol",
    "TaskQueueProtocol",
]
