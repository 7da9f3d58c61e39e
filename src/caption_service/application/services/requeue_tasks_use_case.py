"""
Requeue Tasks Use Case

Operator recovery for tasks that are stuck without a live message:
a publish that failed after the record was written, or a message whose
retries were exhausted while the status store was down.

Re-publishing is safe under at-least-once delivery: a worker skips a task
that has meanwhile become terminal, and reprocesses one left in PROCESSING.
"""

import logging
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from caption_service.application.ports import TaskQueueProtocol, TaskStatusStoreProtocol
from caption_service.domain.captioning import QueueMessage, TaskStatus

logger = logging.getLogger(__name__)


class RequeueReport(BaseModel):
    """
    Attributes:
        task_ids: Tasks that were (or, in a dry run, would be) re-published
        dry_run: True if nothing was published
    """

    task_ids: list[str] = Field(default_factory=list)
    dry_run: bool = False

    @property
    def count(self) -> int:
        return len(self.task_ids)


class RequeueTasksUseCase:
    """
    Re-publish queue messages for non-terminal tasks.

    Examples:
        >>> use_case = RequeueTasksUseCase(status_store, task_queue)
        >>> report = use_case.execute(statuses=[TaskStatus.PENDING])
        >>> report.count
        3
    """

    def __init__(
        self, status_store: TaskStatusStoreProtocol, task_queue: TaskQueueProtocol
    ) -> None:
        self.status_store = status_store
        self.task_queue = task_queue

    def execute(
        self,
        statuses: Optional[Iterable[TaskStatus]] = None,
        dry_run: bool = False,
    ) -> RequeueReport:
        """
        Args:
            statuses: Non-terminal statuses to include (default: PENDING and PROCESSING)
            dry_run: Only report what would be re-published

        Raises:
            ValueError: If a terminal status is requested
            InfrastructureError: If the status store or queue is unreachable
        """
        wanted = set(statuses or (TaskStatus.PENDING, TaskStatus.PROCESSING))
        terminal = [s.value for s in wanted if s.is_terminal]
        if terminal:
            raise ValueError(f"Terminal tasks cannot be requeued: {terminal}")

        report = RequeueReport(dry_run=dry_run)
        for task in self.status_store.iter_unfinished():
            if task.status not in wanted:
                continue

            if not dry_run:
                self.task_queue.publish(
                    QueueMessage(task_id=task.id, extension=task.extension)
                )
            report.task_ids.append(task.id)
            logger.info(
                f"{'Would requeue' if dry_run else 'Requeued'} task {task.id} "
                f"({task.status.value}, attempts={task.attempts})"
            )

        logger.info(f"Requeue finished: {report.count} task(s)")
        return report
