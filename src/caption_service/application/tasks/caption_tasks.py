"""
Celery Task for Asynchronous Image Captioning

Consumer side of the work queue: one task invocation per delivered
message. Thin wrapper around ProcessCaptionTaskUseCase.

Responsibility:
    - Rebuild the QueueMessage from task kwargs
    - Run the use case with per-process infrastructure adapters
    - Retry on InfrastructureError with exponential backoff
    - Log each step with timestamp and memory usage

Architecture Notes:
    - Part of Application Layer (orchestration)
    - Acknowledgement happens after return (task_acks_late), so the terminal
      status is always persisted before the message leaves the queue
    - Engine failures never reach Celery: they are recorded as FAILURE
    - After worker_max_retries the error is logged at CRITICAL and the task
      record stays non-terminal; scripts/requeue_tasks.py re-enqueues it
"""

import logging
import os
import threading
from datetime import datetime
from typing import Optional

import psutil
from celery import Task

from caption_service.application.services import ProcessCaptionTaskUseCase
from caption_service.domain.captioning import QueueMessage
from caption_service.domain.shared.exceptions import (
    InfrastructureError,
    TaskNotFoundError,
)
from caption_service.infrastructure.engine import SubprocessCaptionEngine
from caption_service.infrastructure.file_storage import ImageStorageService
from caption_service.infrastructure.persistence.redis import RedisTaskStatusStore

from .celery_app import celery_app, settings

# Configure logger for this module
logger = logging.getLogger(__name__)

_use_case: Optional[ProcessCaptionTaskUseCase] = None
_use_case_lock = threading.Lock()


def get_process_use_case() -> ProcessCaptionTaskUseCase:
    """
    Per-process use case wired to Redis, image storage and the engine.

    Built on first use inside the worker process (after fork).
    """
    global _use_case

    if _use_case is None:
        with _use_case_lock:
            if _use_case is None:
                _use_case = ProcessCaptionTaskUseCase(
                    status_store=RedisTaskStatusStore.from_settings(settings),
                    image_storage=ImageStorageService(
                        settings.image_dir, settings.allowed_extensions
                    ),
                    engine=SubprocessCaptionEngine(
                        command=settings.engine_command,
                        image_arg=settings.engine_image_arg,
                        timeout_seconds=settings.engine_timeout_seconds,
                        workdir=settings.engine_workdir,
                        env=settings.engine_env,
                    ),
                )
    return _use_case


class CaptionWorkerTask(Task):
    """Base task that reports messages which exhausted their retries."""

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        logger.critical(
            f"Task {kwargs.get('task_id', task_id)} gave up after "
            f"{self.request.retries} retries: {exc}. "
            f"Record left non-terminal; re-enqueue with scripts/requeue_tasks.py"
        )


@celery_app.task(
    bind=True,
    base=CaptionWorkerTask,
    name="process_caption",
    autoretry_for=(InfrastructureError,),
    max_retries=settings.worker_max_retries,
    retry_backoff=True,  # Enable exponential backoff
    retry_backoff_max=settings.worker_retry_backoff_max,
    retry_jitter=True,
    time_limit=settings.worker_hard_time_limit,
)
def process_caption_task(self: Task, task_id: str, extension: str) -> dict:
    """
    Caption the image of one task and persist the outcome.

    Args:
        self: Celery task instance (bind=True gives access to self.request)
        task_id: Task identifier (UUID string)
        extension: Image extension with leading dot

    Returns:
        dict: ProcessingOutcome as JSON-compatible dict:
            {
                "task_id": str,
                "status": str,            # "Success" / "Failure" / current status if skipped
                "skipped": bool,          # True for duplicate deliveries
                "attempts": int,
                "duration_seconds": float
            }
            or {"task_id": str, "status": "NotFound", ...} when no record exists

    Raises:
        InfrastructureError: Status store unreachable (retried with backoff)
    """
    process = psutil.Process(os.getpid())

    def log_with_memory(stage: str, message: str):
        memory_mb = process.memory_info().rss / 1024 / 1024
        timestamp = datetime.now().isoformat()
        logger.info(f"{timestamp} | {memory_mb:.1f}MB | {stage} | {message}")

    message = QueueMessage(task_id=task_id, extension=extension)
    log_with_memory(
        "START",
        f"Task {message.image_name} received (delivery {self.request.retries + 1})",
    )

    try:
        outcome = get_process_use_case().execute(message)
    except TaskNotFoundError as e:
        # No record to update: acknowledge and drop the message
        logger.error(f"Dropping message for {task_id}: {e.message}")
        return {
            "task_id": task_id,
            "status": "NotFound",
            "skipped": True,
            "attempts": 0,
            "duration_seconds": 0.0,
        }
    except InfrastructureError as e:
        log_with_memory("ERROR", f"Task {task_id}: {e.message}")
        raise

    log_with_memory(
        "DONE",
        f"Task {task_id} -> {outcome.status.value}"
        + (" (skipped)" if outcome.skipped else ""),
    )
    return outcome.model_dump(mode="json")
