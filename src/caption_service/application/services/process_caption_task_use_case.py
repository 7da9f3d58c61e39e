"""
Process Caption Task Use Case

Responsibility:
    Handles one delivered queue message: moves the task to PROCESSING,
    runs the captioning engine and records the terminal outcome.

Architecture Notes:
    - Part of Application Layer (Services)
    - Called by the Celery task (tasks/caption_tasks.py)
    - Engine and image failures, expected or not, are data (FAILURE record);
      infrastructure failures propagate so the Celery task can retry the message
    - Safe under at-least-once delivery: a message for a terminal task is
      a no-op, and a racing terminal write is detected by the store

Process Flow:
    QueueMessage(task_id, extension)
    → StatusStore.get()                 (unknown → TaskNotFoundError, terminal → skipped)
    → StatusStore.transition(PROCESSING)
    → ImageStorage.image_exists()       (missing or unresolvable → FAILURE)
    → CaptionEngine.caption()
    → StatusStore.transition(SUCCESS | FAILURE)
    → ProcessingOutcome
"""

import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from caption_service.application.ports import (
    CaptionEngineProtocol,
    ImageStorageProtocol,
    TaskStatusStoreProtocol,
)
from caption_service.domain.captioning import CaptionTask, QueueMessage, TaskStatus
from caption_service.domain.shared.exceptions import (
    ImageMissingError,
    InfrastructureError,
    InvalidStatusTransitionError,
    ProcessingError,
    TaskNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class ProcessingOutcome(BaseModel):
    """
    What a worker did with one message.

    Attributes:
        task_id: Task identifier
        status: Status persisted when the worker finished
        skipped: True if the task was already terminal on arrival
        attempts: Processing attempts recorded for the task
        duration_seconds: Engine wall time (0 when the engine did not run)
    """

    task_id: str
    status: TaskStatus
    skipped: bool = False
    attempts: int = Field(default=0, ge=0)
    duration_seconds: float = Field(default=0.0, ge=0.0)


class ProcessCaptionTaskUseCase:
    """
    Worker-side orchestration for a single task.

    Examples:
        >>> use_case = ProcessCaptionTaskUseCase(store, storage, engine)
        >>> outcome = use_case.execute(QueueMessage(task_id, ".png"))
        >>> outcome.status
        <TaskStatus.SUCCESS: 'Success'>
    """

    def __init__(
        self,
        status_store: TaskStatusStoreProtocol,
        image_storage: ImageStorageProtocol,
        engine: CaptionEngineProtocol,
    ) -> None:
        self.status_store = status_store
        self.image_storage = image_storage
        self.engine = engine

    def execute(self, message: QueueMessage) -> ProcessingOutcome:
        """
        Process one message to a terminal status.

        Returns:
            ProcessingOutcome (skipped=True when the task was already terminal)

        Raises:
            TaskNotFoundError: No record exists for message.task_id
            InfrastructureError: Status store unreachable (message should be retried)
        """
        task = self.status_store.get(message.task_id)
        if task is None:
            raise TaskNotFoundError(message.task_id)

        if task.is_terminal:
            logger.info(
                f"Task {task.id} already {task.status.value}, skipping duplicate delivery"
            )
            return self._skipped(task)

        try:
            task = self.status_store.transition(task.id, TaskStatus.PROCESSING)
        except InvalidStatusTransitionError:
            # Another worker finished it between our read and write
            return self._skipped(self._reload(task.id))

        if task.attempts > 1:
            logger.warning(f"Task {task.id} redelivered, attempt {task.attempts}")

        result_text: Optional[str] = None
        error_text: Optional[str] = None
        duration = 0.0

        try:
            image_path = self._locate_image(task)
            caption = self.engine.caption(image_path)
            result_text = caption.text
            duration = caption.duration_seconds
        except ProcessingError as e:
            error_text = e.message
            logger.warning(f"Task {task.id} failed: {error_text}")
        except InfrastructureError:
            raise
        except Exception as e:
            # A task in PROCESSING must still end terminal once its message is acked
            error_text = f"Unexpected captioning error: {e.__class__.__name__}: {e}"
            logger.exception(f"Task {task.id} failed unexpectedly")

        target = TaskStatus.SUCCESS if error_text is None else TaskStatus.FAILURE
        try:
            task = self.status_store.transition(
                task.id, target, result=result_text, error=error_text
            )
        except InvalidStatusTransitionError:
            logger.info(f"Task {task.id} reached a terminal status concurrently")
            return self._skipped(self._reload(task.id))

        logger.info(f"Task {task.id} finished with {task.status.value}")
        return ProcessingOutcome(
            task_id=task.id,
            status=task.status,
            attempts=task.attempts,
            duration_seconds=duration,
        )

    def _locate_image(self, task: CaptionTask) -> Path:
        """Stored image path, or ImageMissingError if it cannot be resolved."""
        try:
            if self.image_storage.image_exists(task.id, task.extension):
                return self.image_storage.get_image_path(task.id, task.extension)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Task {task.id} image cannot be resolved: {e}")
        raise ImageMissingError(task.image_ref)

    def _reload(self, task_id: str) -> CaptionTask:
        task = self.status_store.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    @staticmethod
    def _skipped(task: CaptionTask) -> ProcessingOutcome:
        return ProcessingOutcome(
            task_id=task.id, status=task.status, skipped=True, attempts=task.attempts
        )
