"""
TaskStatusReader - Read Queries

Read side of the task lifecycle: status, result and error lookups by
task id, straight from the status store.

Responsibility:
    - Map "no record" to TaskNotFoundError
    - Expose result only for SUCCESS and error only for FAILURE

Architecture Notes:
    - Part of Application Layer (orchestration)
    - API Layer → TaskStatusReader → TaskStatusStoreProtocol (Redis)
    - No caching: every call returns the latest persisted record
"""

import logging

from caption_service.application.ports import TaskStatusStoreProtocol
from caption_service.domain.captioning import CaptionTask, TaskStatus
from caption_service.domain.shared.exceptions import (
    ErrorNotAvailableError,
    ResultNotAvailableError,
    TaskNotFoundError,
)

logger = logging.getLogger(__name__)


class TaskStatusReader:
    """
    Query handler for task status, result and error.

    Examples:
        >>> reader = TaskStatusReader(status_store)
        >>> reader.get_status(task_id)
        <TaskStatus.SUCCESS: 'Success'>
        >>> reader.get_result(task_id)
        'a cat sitting on a couch'
        >>> reader.get_error(task_id)
        Traceback (most recent call last):
        ...
        ErrorNotAvailableError: Task ... has no error (status: Success)
    """

    def __init__(self, status_store: TaskStatusStoreProtocol) -> None:
        self.status_store = status_store

    def get_task(self, task_id: str) -> CaptionTask:
        """
        Full snapshot of a task record.

        Raises:
            TaskNotFoundError: If no record exists (including malformed ids)
            InfrastructureError: If the status store is unreachable
        """
        logger.debug(f"Retrieving task: {task_id}")
        task = self.status_store.get(task_id)
        if task is None:
            logger.warning(f"Task not found: {task_id}")
            raise TaskNotFoundError(task_id)
        return task

    def get_status(self, task_id: str) -> TaskStatus:
        return self.get_task(task_id).status

    def get_result(self, task_id: str) -> str:
        """
        Caption text of a succeeded task.

        Raises:
            TaskNotFoundError: Unknown id
            ResultNotAvailableError: Task is not SUCCESS
        """
        task = self.get_task(task_id)
        if task.status != TaskStatus.SUCCESS or task.result is None:
            raise ResultNotAvailableError(task_id, task.status.value)
        return task.result

    def get_error(self, task_id: str) -> str:
        """
        Diagnostic text of a failed task.

        Raises:
            TaskNotFoundError: Unknown id
            ErrorNotAvailableError: Task is not FAILURE
        """
        task = self.get_task(task_id)
        if task.status != TaskStatus.FAILURE or task.error is None:
            raise ErrorNotAvailableError(task_id, task.status.value)
        return task.error
