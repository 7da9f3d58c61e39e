"""
API Dependency Injection

Builds the Application Layer objects used by routers. Each provider is a
plain function so tests can replace it with app.dependency_overrides.

Architecture Pattern:
    API Layer → Use Case / Reader → Infrastructure adapters

    One status store, image storage and queue producer per API process,
    all sharing the process-wide Redis and broker pools.
"""

from functools import lru_cache

from caption_service.application.queries import TaskStatusReader
from caption_service.application.services import SubmitCaptionTaskUseCase
from caption_service.application.tasks.celery_app import celery_app, settings
from caption_service.config import Settings
from caption_service.infrastructure.file_storage import ImageStorageService
from caption_service.infrastructure.persistence.redis import RedisTaskStatusStore
from caption_service.infrastructure.queue import CeleryTaskQueue


def get_settings() -> Settings:
    return settings


@lru_cache(maxsize=1)
def get_status_store() -> RedisTaskStatusStore:
    return RedisTaskStatusStore.from_settings(settings)


@lru_cache(maxsize=1)
def get_image_storage() -> ImageStorageService:
    return ImageStorageService(settings.image_dir, settings.allowed_extensions)


@lru_cache(maxsize=1)
def get_task_queue() -> CeleryTaskQueue:
    return CeleryTaskQueue(celery_app, settings.task_queue_name)


def get_submit_use_case() -> SubmitCaptionTaskUseCase:
    """
    Dependency injection for SubmitCaptionTaskUseCase.

    Returns:
        SubmitCaptionTaskUseCase wired to image storage, status store and queue
    """
    return SubmitCaptionTaskUseCase(
        image_storage=get_image_storage(),
        status_store=get_status_store(),
        task_queue=get_task_queue(),
        settings=settings,
    )


def get_status_reader() -> TaskStatusReader:
    """Dependency injection for TaskStatusReader."""
    return TaskStatusReader(get_status_store())
