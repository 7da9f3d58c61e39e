"""
Celery application initialization.

Creates the Celery app shared by the API (producer side) and the caption
workers (consumer side), bound to the durable work queue.

Delivery guarantees:
    - task_acks_late: a message is acknowledged only after the task returns,
      i.e. after the terminal status is persisted
    - task_reject_on_worker_lost: a killed worker process leaves the message
      for redelivery instead of acknowledging it
    - worker_prefetch_multiplier=1: a worker holds at most one unacknowledged
      message per process
    - Redis transport visibility_timeout: unacknowledged messages are
      redelivered after this many seconds

Architecture Note:
    - Part of Application Layer (orchestration)
    - Configuration comes from Settings (environment / .env)
    - Worker processes open the Redis status store pool in worker_process_init
      and close it in worker_process_shutdown
"""

import logging
from datetime import datetime

from celery import Celery
from celery.signals import worker_process_init, worker_process_shutdown
from kombu import Queue

from caption_service.config import Settings
from caption_service.infrastructure.persistence.redis import (
    close_connections,
    get_redis_client,
)

logger = logging.getLogger(__name__)


def create_celery_app(settings: Settings) -> Celery:
    """
    Build a Celery app for the given settings.

    Args:
        settings: Service settings (broker, queue name, retry and time limits)

    Returns:
        Configured Celery instance
    """
    app = Celery(
        "caption_service",
        broker=settings.celery_broker_url,
        backend=settings.celery_result_backend,
        include=["caption_service.application.tasks.caption_tasks"],
    )

    app.conf.update(
        task_default_queue=settings.task_queue_name,
        task_queues=(Queue(settings.task_queue_name, durable=True),),
        task_routes={"process_caption": {"queue": settings.task_queue_name}},
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        task_track_started=True,
        task_acks_late=True,
        task_reject_on_worker_lost=True,
        worker_prefetch_multiplier=1,
        task_time_limit=settings.worker_hard_time_limit,
        result_expires=3600,  # Results expire after 1 hour
        broker_transport_options={
            "visibility_timeout": settings.broker_visibility_timeout
        },
        broker_connection_retry_on_startup=True,
    )
    return app


# Shared settings and app for API and worker processes
settings = Settings.from_env()
celery_app = create_celery_app(settings)


@worker_process_init.connect
def init_worker_process(**kwargs) -> None:
    """Open the Redis pool for this worker process."""
    get_redis_client(settings)
    logger.info("Worker process initialized Redis connection pool")


@worker_process_shutdown.connect
def shutdown_worker_process(**kwargs) -> None:
    close_connections()


@celery_app.task(name="health_check")
def health_check() -> dict:
    """
    Simple health check task to verify broker and worker connectivity.

    Returns:
        dict: Status information with timestamp
            - status (str): "ok" if healthy
            - message (str): Human-readable status message
            - timestamp (str): ISO format timestamp
            - worker (str): Worker hostname that executed the task

    Example:
        >>> result = health_check.delay()
        >>> print(result.get(timeout=5))
        {
            'status': 'ok',
            'message': 'Celery worker is healthy',
            'timestamp': '2025-10-03T10:30:45.123456',
            'worker': 'celery@hostname'
        }
    """
    return {
        "status": "ok",
        "message": "Celery worker is healthy",
        "timestamp": datetime.now().isoformat(),
        "worker": (
            celery_app.current_task.request.hostname
            if celery_app.current_task
            else "unknown"
        ),
    }
