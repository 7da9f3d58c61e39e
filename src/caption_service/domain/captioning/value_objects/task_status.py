"""
TaskStatus Value Object.

Lifecycle states of a captioning task and the allowed transitions between them.
"""

from enum import Enum


class TaskStatus(str, Enum):
    """
    Status of a captioning task.

    State transitions (forward only):
        PENDING -> PROCESSING -> SUCCESS
                             -> FAILURE

    PROCESSING -> PROCESSING is allowed: a task left in PROCESSING by a
    crashed worker is picked up again when its message is redelivered.
    SUCCESS and FAILURE are terminal.

    Values are the wire keywords returned to polling clients.

    Usage:
        >>> TaskStatus.PENDING.value
        'Pending'
        >>> TaskStatus.SUCCESS.is_terminal
        True
        >>> TaskStatus.PENDING.can_transition_to(TaskStatus.SUCCESS)
        False
    """

    PENDING = "Pending"
    PROCESSING = "Processing"
    SUCCESS = "Success"
    FAILURE = "Failure"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.SUCCESS, TaskStatus.FAILURE)

    def can_transition_to(self, target: "TaskStatus") -> bool:
        return target in _ALLOWED_TRANSITIONS[self]


_ALLOWED_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset({TaskStatus.PROCESSING}),
    TaskStatus.PROCESSING: frozenset(
        {TaskStatus.PROCESSING, TaskStatus.SUCCESS, TaskStatus.FAILURE}
    ),
    TaskStatus.SUCCESS: frozenset(),
    TaskStatus.FAILURE: frozenset(),
}
