"""
Queries Module

Read operations for task status, result and error.

Exports:
    - TaskStatusReader: Status/result/error lookups by task id
"""

from caption_service.application.queries.task_status_reader import TaskStatusReader

__all__ = ["TaskStatusReader"]
