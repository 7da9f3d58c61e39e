"""
Queue Infrastructure Module

Exports:
    - CeleryTaskQueue: Producer publishing task references to the work queue
"""

from .celery_task_queue import PROCESS_CAPTION_TASK_NAME, CeleryTaskQueue

__all__ = ["CeleryTaskQueue", "PROCESS_CAPTION_TASK_NAME"]
