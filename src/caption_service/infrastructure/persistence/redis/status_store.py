"""
Redis Task Status Store

Durable record of each captioning task's state, keyed by task id.
Used by the submitter (create), the worker (transitions) and the
status reader (reads).

Responsibility:
    - Store one Redis hash per task
    - Create-if-absent on submission
    - Forward-only transitions enforced against the latest persisted record
    - Map Redis client errors to InfrastructureError

Storage Format:
    Key: "caption:task:{task_id}" -> HASH
    {
        "id": "3fa85f64-...",
        "image_ref": "3fa85f64-....png",
        "extension": ".png",
        "status": "Processing",            # Pending/Processing/Success/Failure
        "attempts": "1",
        "created_at": "2025-01-11T10:30:45.123",
        "updated_at": "2025-01-11T10:30:47.001",
        "result": "a cat sitting on a couch"   # only on Success
        "error": "..."                          # only on Failure
    }

Atomicity:
    - Every write is a single MULTI/EXEC, so readers never see a half-written record
    - Transitions run under WATCH: if another writer touches the record between
      read and write, redis-py re-runs the transition against the new state.
      A duplicate worker racing to a terminal state therefore sees the terminal
      record and gets InvalidStatusTransitionError instead of overwriting it.

Retention:
    No TTL. Records live until an external cleanup policy removes them.
"""

import logging
from typing import Iterator, Optional

from redis import Redis
from redis.client import Pipeline
from redis.exceptions import RedisError

from caption_service.config import Settings
from caption_service.domain.captioning import CaptionTask, TaskStatus
from caption_service.domain.shared.exceptions import (
    InfrastructureError,
    TaskNotFoundError,
)
from caption_service.infrastructure.persistence.redis.connection import (
    get_redis_client,
)

# Configure logger for this module
logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "caption:task"


class RedisTaskStatusStore:
    """
    Task status store backed by Redis hashes.

    Implements TaskStatusStoreProtocol from Application Layer.

    Examples:
        >>> store = RedisTaskStatusStore.from_settings(settings)
        >>> task = CaptionTask.new(".png")
        >>> store.create(task)
        >>> store.get(task.id).status
        <TaskStatus.PENDING: 'Pending'>
        >>> store.transition(task.id, TaskStatus.PROCESSING)
    """

    def __init__(self, redis: Redis, key_prefix: str = DEFAULT_KEY_PREFIX) -> None:
        """
        Args:
            redis: Redis client (normally sharing the process-wide pool)
            key_prefix: Namespace for task keys
        """
        self.redis = redis
        self.key_prefix = key_prefix

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisTaskStatusStore":
        return cls(get_redis_client(settings, verify=False))

    def _get_task_key(self, task_id: str) -> str:
        """
        Generate Redis key for task record.

        Examples:
            >>> store._get_task_key("abc-123")
            'caption:task:abc-123'
        """
        return f"{self.key_prefix}:{task_id}"

    def create(self, task: CaptionTask) -> None:
        """
        Persist a new task record.

        Args:
            task: Freshly created task (normally PENDING)

        Raises:
            ValueError: If a record already exists for task.id
            InfrastructureError: If Redis is unreachable
        """
        key = self._get_task_key(task.id)

        def _create(pipe: Pipeline) -> None:
            if pipe.exists(key):
                raise ValueError(f"Task {task.id} already exists")
            pipe.multi()
            pipe.hset(key, mapping=task.to_dict())

        try:
            self.redis.transaction(_create, key)
        except RedisError as e:
            logger.error(f"Redis error in create for {task.id}: {e}")
            raise InfrastructureError(
                f"Status store unavailable while creating task {task.id}",
                original_error=e,
            ) from e

        logger.info(f"Task {task.id} created with status {task.status.value}")

    def get(self, task_id: str) -> Optional[CaptionTask]:
        """
        Read the latest persisted record.

        Returns:
            CaptionTask if found, None if no record exists

        Raises:
            InfrastructureError: If Redis is unreachable
        """
        try:
            data = self.redis.hgetall(self._get_task_key(task_id))
        except RedisError as e:
            logger.warning(f"Redis error in get for {task_id}: {e}")
            raise InfrastructureError(
                f"Status store unavailable while reading task {task_id}",
                original_error=e,
            ) from e

        if not data:
            return None
        return CaptionTask.from_dict(data)

    def transition(
        self,
        task_id: str,
        target: TaskStatus,
        result: Optional[str] = None,
        error: Optional[str] = None,
    ) -> CaptionTask:
        """
        Atomically move a task to a new status.

        Args:
            task_id: Task identifier
            target: Requested status
            result: Caption text (SUCCESS only)
            error: Diagnostic text (FAILURE only)

        Returns:
            The task as persisted after the transition

        Raises:
            TaskNotFoundError: If no record exists
            InvalidStatusTransitionError: If the move is not allowed from the
                persisted status (e.g. the task is already terminal)
            InfrastructureError: If Redis is unreachable
        """
        key = self._get_task_key(task_id)

        def _apply(pipe: Pipeline) -> CaptionTask:
            # In WATCH mode commands execute immediately until multi()
            data = pipe.hgetall(key)
            if not data:
                raise TaskNotFoundError(task_id)

            task = CaptionTask.from_dict(data)
            task.transition_to(target, result=result, error=error)

            pipe.multi()
            pipe.hset(key, mapping=task.to_dict())
            return task

        try:
            task = self.redis.transaction(_apply, key, value_from_callable=True)
        except RedisError as e:
            logger.error(
                f"Redis error in transition for {task_id} -> {target.value}: {e}"
            )
            raise InfrastructureError(
                f"Status store unavailable while updating task {task_id}",
                original_error=e,
            ) from e

        logger.info(f"Task {task_id} moved to {task.status.value}")
        return task

    def iter_unfinished(self) -> Iterator[CaptionTask]:
        """
        Yield tasks that are still PENDING or PROCESSING.

        Used by operators to re-enqueue tasks whose message was lost
        (e.g. publish failed after the record was written).
        """
        try:
            for key in self.redis.scan_iter(match=f"{self.key_prefix}:*", count=100):
                data = self.redis.hgetall(key)
                if not data:
                    continue
                task = CaptionTask.from_dict(data)
                if not task.is_terminal:
                    yield task
        except RedisError as e:
            logger.error(f"Redis error in iter_unfinished: {e}")
            raise InfrastructureError(
                "Status store unavailable while scanning tasks", original_error=e
            ) from e
