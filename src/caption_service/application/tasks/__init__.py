"""
Celery Tasks

Responsibility:
    Worker-side task definitions consuming the captioning work queue.

Contains:
    - celery_app.py - Celery configuration and worker process signals
    - caption_tasks.py - process_caption task (loaded by the worker through
      the app's include list, not imported here so API processes only get
      the app)

Does NOT contain:
    - Business logic (delegates to Application services)
"""

from .celery_app import celery_app, create_celery_app, health_check

__all__ = ["celery_app", "create_celery_app", "health_check"]
