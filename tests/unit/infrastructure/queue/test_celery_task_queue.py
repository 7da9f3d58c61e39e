"""
Tests for CeleryTaskQueue producer.

Covers:
- send_task call (task name, kwargs, queue, pooled producer)
- Producer released after publish
- Broker errors mapped to InfrastructureError
- close()
"""

from unittest.mock import MagicMock

import pytest
from kombu.exceptions import OperationalError

from caption_service.domain.captioning import QueueMessage
from caption_service.domain.shared.exceptions import InfrastructureError
from caption_service.infrastructure.queue import (
    PROCESS_CAPTION_TASK_NAME,
    CeleryTaskQueue,
)

TASK_ID = "3fa85f64-5717-4562-b3fc-2c963f66afa6"


@pytest.fixture
def producer():
    return MagicMock(name="producer")


@pytest.fixture
def celery_app(producer):
    app = MagicMock(name="celery_app")
    acquired = app.producer_pool.acquire.return_value
    acquired.__enter__.return_value = producer
    # Do not suppress exceptions raised inside the with block
    acquired.__exit__.return_value = False
    return app


@pytest.fixture
def queue(celery_app):
    return CeleryTaskQueue(celery_app, "task_queue")


def test_publish_sends_process_caption_task(queue, celery_app, producer):
    queue.publish(QueueMessage(task_id=TASK_ID, extension=".png"))

    celery_app.producer_pool.acquire.assert_called_once_with(block=True)
    args, kwargs = celery_app.send_task.call_args
    assert args == (PROCESS_CAPTION_TASK_NAME,)
    assert kwargs["kwargs"] == {"task_id": TASK_ID, "extension": ".png"}
    assert kwargs["queue"] == "task_queue"
    assert kwargs["producer"] is producer
    assert kwargs["delivery_mode"] == 2


def test_publish_releases_producer(queue, celery_app):
    queue.publish(QueueMessage(task_id=TASK_ID, extension=".png"))

    celery_app.producer_pool.acquire.return_value.__exit__.assert_called_once()


def test_publish_maps_broker_error(queue, celery_app):
    celery_app.send_task.side_effect = OperationalError("Connection refused")

    with pytest.raises(InfrastructureError) as exc_info:
        queue.publish(QueueMessage(task_id=TASK_ID, extension=".png"))

    assert TASK_ID in exc_info.value.message
    assert isinstance(exc_info.value.original_error, OperationalError)
    # Producer is still released on failure
    celery_app.producer_pool.acquire.return_value.__exit__.assert_called_once()


def test_close_releases_pool(queue, celery_app):
    queue.close()
    celery_app.pool.force_close_all.assert_called_once()
