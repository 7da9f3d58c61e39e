"""
Task Queue Port

Protocol implemented by the producer side of the message queue.
"""

from typing import Protocol

from caption_service.domain.captioning import QueueMessage


class TaskQueueProtocol(Protocol):
    """
    Durable at-least-once channel from submitter to workers.

    Contract:
        - publish() returns only after the broker accepted the message
        - publish() raises InfrastructureError when the broker is unreachable
    """

    def publish(self, message: QueueMessage) -> None: ...
