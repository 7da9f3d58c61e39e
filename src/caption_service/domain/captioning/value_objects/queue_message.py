"""
QueueMessage Value Object.

Reference to a submitted task, carried by the message queue from the
submitter to a worker. Holds only what a worker needs to locate the image.
"""

from dataclasses import dataclass
from typing import Any

from .image_extension import normalize_extension


@dataclass(frozen=True)
class QueueMessage:
    """
    Immutable task reference published to the queue.

    Attributes:
        task_id: Task identifier (UUID string)
        extension: Image extension with leading dot (e.g. ".png")

    Examples:
        >>> msg = QueueMessage(task_id="3fa85f64-5717-4562-b3fc-2c963f66afa6", extension="PNG")
        >>> msg.extension
        '.png'
        >>> msg.image_name
        '3fa85f64-5717-4562-b3fc-2c963f66afa6.png'
    """

    task_id: str
    extension: str

    def __post_init__(self) -> None:
        if not self.task_id:
            raise ValueError("QueueMessage.task_id must not be empty")
        # frozen dataclass: bypass __setattr__ to store normalized value
        object.__setattr__(self, "extension", normalize_extension(self.extension))

    @property
    def image_name(self) -> str:
        return f"{self.task_id}{self.extension}"

    def to_payload(self) -> dict[str, Any]:
        """Serialize to Celery task kwargs."""
        return {"task_id": self.task_id, "extension": self.extension}

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "QueueMessage":
        """Deserialize from Celery task kwargs."""
        return cls(task_id=str(payload["task_id"]), extension=str(payload["extension"]))
