"""
Infrastructure Layer - External Dependencies

Implements technical capabilities behind the Application Layer ports.
Handles all external dependencies: Redis, message broker, file system,
captioning engine process.

Architecture:
    - Implements Application Layer protocols (TaskStatusStoreProtocol,
      ImageStorageProtocol, TaskQueueProtocol, CaptionEngineProtocol)
    - Depends on external libraries (redis, celery/kombu)
    - No Domain business logic (only technical implementations)

Modules:
    - persistence: Redis status store and connection pool
    - file_storage: Image blob store on the local/shared file system
    - queue: Celery producer for the work queue
    - engine: Subprocess captioning engine

Usage:
    >>> from caption_service.infrastructure import (
    ...     RedisTaskStatusStore,
    ...     ImageStorageService,
    ...     SubprocessCaptionEngine,
    ... )
"""

# Persistence
from .persistence import RedisTaskStatusStore

# File Storage
from .file_storage import ImageStorageService

# Queue
from .queue import CeleryTaskQueue

# Engine
from .engine import SubprocessCaptionEngine

__all__ = [
    # Persistence
    "RedisTaskStatusStore",
    # File Storage
    "ImageStorageService",
    # Queue
    "CeleryTaskQueue",
    # Engine
    "SubprocessCaptionEngine",
]
