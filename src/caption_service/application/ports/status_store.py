"""
Status Store Port

Protocol implemented by the durable task record store (Redis in production).
"""

from typing import Iterator, Optional, Protocol

from caption_service.domain.captioning import CaptionTask, TaskStatus


class TaskStatusStoreProtocol(Protocol):
    """
    Durable key/value record of task state, keyed by task id.

    Contract:
        - create() writes a PENDING record only if none exists for the id
        - transition() applies CaptionTask.transition_to() atomically against
          the latest persisted record and returns the persisted task
        - get() returns the most recently persisted record or None
        - iter_unfinished() yields PENDING and PROCESSING records
        - All methods raise InfrastructureError when the store is unreachable
    """

    def create(self, task: CaptionTask) -> None: ...

    def get(self, task_id: str) -> Optional[CaptionTask]: ...

    def transition(
        self,
        task_id: str,
        target: TaskStatus,
        result: Optional[str] = None,
        error: Optional[str] = None,
    ) -> CaptionTask: ...

    def iter_unfinished(self) -> Iterator[CaptionTask]: ...
