"""
Application Services

Responsibility:
    Use cases that coordinate the domain with infrastructure ports.

Contains:
    - SubmitCaptionTaskUseCase: API-side submission (store image, record, enqueue)
    - ProcessCaptionTaskUseCase: Worker-side processing of one message
    - RequeueTasksUseCase: Operator re-publishing of non-terminal tasks

Does NOT contain:
    - Domain business logic (use Domain entities)
    - Direct infrastructure calls (use dependency injection)
"""

from .process_caption_task_use_case import ProcessCaptionTaskUseCase, ProcessingOutcome
from .requeue_tasks_use_case import RequeueReport, RequeueTasksUseCase
from .submit_caption_task_use_case import SubmitCaptionTaskUseCase, SubmitTaskResult

__all__ = [
    "SubmitCaptionTaskUseCase",
    "SubmitTaskResult",
    "ProcessCaptionTaskUseCase",
    "ProcessingOutcome",
    "RequeueTasksUseCase",
    "RequeueReport",
]
