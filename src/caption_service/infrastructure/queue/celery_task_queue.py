"""
Celery Task Queue Producer

Publishes task references to the durable work queue consumed by
caption workers.

Responsibility:
    - Serialize QueueMessage as task kwargs for "process_caption"
    - Publish to the configured durable queue with persistent delivery
    - Reuse broker connections via Celery's producer pool
    - Map broker errors to InfrastructureError

Architecture Notes:
    - Infrastructure Layer (message broker)
    - Implements TaskQueueProtocol from Application Layer
    - Sends by task name, so the API process never imports worker code
"""

import logging

from celery import Celery
from kombu.exceptions import KombuError, OperationalError

from caption_service.domain.captioning import QueueMessage
from caption_service.domain.shared.exceptions import InfrastructureError

# Configure logger for this module
logger = logging.getLogger(__name__)

PROCESS_CAPTION_TASK_NAME = "process_caption"


class CeleryTaskQueue:
    """
    Producer side of the work queue.

    Examples:
        >>> queue = CeleryTaskQueue(celery_app, "task_queue")
        >>> queue.publish(QueueMessage(task_id="3fa85f64-...", extension=".png"))
    """

    def __init__(self, celery_app: Celery, queue_name: str) -> None:
        self.celery_app = celery_app
        self.queue_name = queue_name

    def publish(self, message: QueueMessage) -> None:
        """
        Enqueue one task reference.

        The message is marked persistent and routed to the durable queue,
        so it survives broker restarts once this call returns.

        Raises:
            InfrastructureError: If the broker rejects or cannot accept the message
        """
        try:
            with self.celery_app.producer_pool.acquire(block=True) as producer:
                self.celery_app.send_task(
                    PROCESS_CAPTION_TASK_NAME,
                    kwargs=message.to_payload(),
                    queue=self.queue_name,
                    producer=producer,
                    delivery_mode=2,  # persistent
                    task_id=message.task_id,
                )
        except (OperationalError, KombuError, OSError) as e:
            logger.error(
                f"Failed to publish task {message.task_id} to {self.queue_name}: {e}"
            )
            raise InfrastructureError(
                f"Task queue unavailable while publishing {message.task_id}",
                original_error=e,
            ) from e

        logger.info(f"Published task {message.image_name} to {self.queue_name}")

    def close(self) -> None:
        """Release pooled broker connections."""
        self.celery_app.pool.force_close_all()
        logger.info("Task queue producer connections closed")
