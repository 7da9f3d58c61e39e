"""
CaptionTask Entity.

Core domain entity representing one submitted image and its captioning
lifecycle. Has identity (task id) and state transitions.

The entity owns the transition rules; stores call transition_to() on a
freshly read copy and persist the outcome, so no store can write a
backward or terminal-overwriting transition.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from caption_service.domain.captioning.value_objects.image_extension import (
    normalize_extension,
)
from caption_service.domain.captioning.value_objects.task_status import TaskStatus
from caption_service.domain.shared.exceptions import InvalidStatusTransitionError


@dataclass
class CaptionTask:
    """
    Mutable entity tracking a captioning task from submission to outcome.

    Attributes:
        id: Task identifier (UUID4 string), immutable
        extension: Image extension with leading dot (".png", ".jpg", ".jpeg")
        status: Current lifecycle status
        result: Caption text, set only on SUCCESS
        error: Diagnostic text, set only on FAILURE
        attempts: How many times a worker moved the task into PROCESSING
        created_at: ISO timestamp of submission
        updated_at: ISO timestamp of the last transition

    Examples:
        >>> task = CaptionTask.new(".png")
        >>> task.status
        <TaskStatus.PENDING: 'Pending'>
        >>> task.transition_to(TaskStatus.PROCESSING)
        >>> task.transition_to(TaskStatus.SUCCESS, result="a cat sitting on a couch")
        >>> task.result
        'a cat sitting on a couch'
    """

    id: str
    extension: str
    status: TaskStatus = TaskStatus.PENDING
    result: Optional[str] = None
    error: Optional[str] = None
    attempts: int = 0
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())
    updated_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def __post_init__(self) -> None:
        self.extension = normalize_extension(self.extension)

    @classmethod
    def new(cls, extension: str) -> "CaptionTask":
        """Create a PENDING task with a fresh UUID4 id."""
        return cls(id=str(uuid4()), extension=extension)

    @property
    def image_ref(self) -> str:
        """Locator of the stored image, relative to the image directory."""
        return f"{self.id}{self.extension}"

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def transition_to(
        self,
        target: TaskStatus,
        result: Optional[str] = None,
        error: Optional[str] = None,
    ) -> None:
        """
        Move the task to a new status.

        Args:
            target: Requested status
            result: Caption text, required for SUCCESS
            error: Diagnostic text, required for FAILURE

        Raises:
            InvalidStatusTransitionError: If the move is not forward along
                Pending -> Processing -> {Success | Failure}
            ValueError: If result/error do not match the target status
        """
        if not self.status.can_transition_to(target):
            raise InvalidStatusTransitionError(
                self.id, self.status.value, target.value
            )

        if target == TaskStatus.SUCCESS:
            if result is None or error is not None:
                raise ValueError("SUCCESS requires a result and no error")
        elif target == TaskStatus.FAILURE:
            if error is None or result is not None:
                raise ValueError("FAILURE requires an error and no result")
        elif result is not None or error is not None:
            raise ValueError(f"{target.value} carries neither result nor error")

        if target == TaskStatus.PROCESSING:
            self.attempts += 1

        self.status = target
        self.result = result
        self.error = error
        self.updated_at = datetime.now().isoformat()

    def to_dict(self) -> dict[str, Any]:
        """
        Flatten to a string mapping (Redis hash layout).

        result/error keys are present only when set.
        """
        data: dict[str, Any] = {
            "id": self.id,
            "image_ref": self.image_ref,
            "extension": self.extension,
            "status": self.status.value,
            "attempts": str(self.attempts),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
        if self.result is not None:
            data["result"] = self.result
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CaptionTask":
        """Rebuild the entity from its to_dict() representation."""
        return cls(
            id=data["id"],
            extension=data["extension"],
            status=TaskStatus(data["status"]),
            result=data.get("result"),
            error=data.get("error"),
            attempts=int(data.get("attempts", 0)),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )

    def __repr__(self) -> str:
        return (
            f"CaptionTask(id={self.id!r}, status={self.status.value!r}, "
            f"attempts={self.attempts})"
        )
