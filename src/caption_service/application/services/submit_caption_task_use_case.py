"""
Submit Caption Task Use Case

Responsibility:
    Accepts an uploaded image, persists it and its PENDING record, and
    enqueues the task for a worker.

Architecture Notes:
    - Part of Application Layer (Services)
    - Called by API Layer (tasks.py router)
    - Returns SubmitTaskResult DTO
    - Generates task_id (UUID4)

Durability Order:
    1. Image bytes stored (ImageStorageProtocol)
    2. PENDING record created (TaskStatusStoreProtocol)
    3. Message published (TaskQueueProtocol)

    A worker can only see a message whose image and record already exist.
    If step 3 fails the record stays PENDING with no message; the caller
    gets an error and the id is logged for re-enqueueing.

Does NOT contain:
    - HTTP concerns (belongs to API Layer)
    - File system / broker operations (delegated to Infrastructure Layer)
"""

import logging
from pathlib import PurePath
from typing import Optional

from pydantic import BaseModel, Field

from caption_service.application.ports import (
    ImageStorageProtocol,
    TaskQueueProtocol,
    TaskStatusStoreProtocol,
)
from caption_service.config import Settings
from caption_service.domain.captioning import (
    CaptionTask,
    QueueMessage,
    normalize_extension,
)
from caption_service.domain.shared.exceptions import (
    EmptyImageError,
    ImageTooLargeError,
    InfrastructureError,
    UnsupportedExtensionError,
)

logger = logging.getLogger(__name__)


# ============================================================================
# DATA TRANSFER OBJECTS (DTOs)
# ============================================================================


class SubmitTaskResult(BaseModel):
    """
    Result of a successful submission.

    Attributes:
        task_id: Identifier to poll with (UUID as string)
        status: Always "Pending" on submission
        message: Human-readable confirmation
    """

    task_id: str = Field(description="Task identifier (UUID as string)")
    status: str = Field(description="Task status after submission")
    message: str = Field(description="Human-readable confirmation")


# ============================================================================
# USE CASE
# ============================================================================


class SubmitCaptionTaskUseCase:
    """
    Use case for submitting an image for captioning.

    Process Flow:
        User uploads image (multipart/form-data)
        → API Layer reads bytes and filename
        → SubmitCaptionTaskUseCase.execute(image_data, filename)
        → Validate extension, emptiness, size (no side effects yet)
        → ImageStorage.save_image()
        → StatusStore.create(PENDING)
        → TaskQueue.publish()
        → Return SubmitTaskResult
        → API Layer converts to HTTP 201 response

    Examples:
        >>> use_case = SubmitCaptionTaskUseCase(storage, store, queue, settings)
        >>> result = await use_case.execute(png_bytes, filename="cat.png")
        >>> result.status
        'Pending'
    """

    def __init__(
        self,
        image_storage: ImageStorageProtocol,
        status_store: TaskStatusStoreProtocol,
        task_queue: TaskQueueProtocol,
        settings: Settings,
    ) -> None:
        self.image_storage = image_storage
        self.status_store = status_store
        self.task_queue = task_queue
        self.settings = settings

    def resolve_extension(
        self, filename: Optional[str], extension: Optional[str]
    ) -> str:
        """
        Pick the extension from an explicit value or the filename suffix.

        Raises:
            UnsupportedExtensionError: If the extension is missing or not allowed
        """
        if extension is None and filename:
            extension = PurePath(filename).suffix
        normalized = normalize_extension(extension or "")

        if not self.settings.is_allowed_extension(normalized):
            raise UnsupportedExtensionError(
                normalized or "(none)", self.settings.allowed_extensions
            )
        return normalized

    async def execute(
        self,
        image_data: bytes,
        filename: Optional[str] = None,
        extension: Optional[str] = None,
    ) -> SubmitTaskResult:
        """
        Submit one image.

        Args:
            image_data: Raw image bytes
            filename: Client filename, used for its extension
            extension: Explicit extension (overrides filename)

        Returns:
            SubmitTaskResult with the new task id

        Raises:
            UnsupportedExtensionError: Extension missing or not allowed
            EmptyImageError: No image content
            ImageTooLargeError: Content above MAX_IMAGE_SIZE_MB
            InfrastructureError: Storage, status store or queue unavailable
        """
        resolved_extension = self.resolve_extension(filename, extension)

        if not image_data:
            raise EmptyImageError()
        if len(image_data) > self.settings.max_image_size_bytes:
            raise ImageTooLargeError(
                len(image_data), self.settings.max_image_size_bytes
            )

        task = CaptionTask.new(resolved_extension)
        logger.info(
            f"Submitting task {task.id} ({len(image_data)} bytes, {resolved_extension})"
        )

        await self.image_storage.save_image(task.id, task.extension, image_data)
        self.status_store.create(task)

        try:
            self.task_queue.publish(
                QueueMessage(task_id=task.id, extension=task.extension)
            )
        except InfrastructureError:
            logger.error(
                f"Task {task.id} stored as {task.status.value} but not enqueued; "
                f"re-enqueue it once the queue is reachable"
            )
            raise

        return SubmitTaskResult(
            task_id=task.id,
            status=task.status.value,
            message="Image accepted for captioning",
        )
