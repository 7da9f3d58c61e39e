from .caption_result import CaptionResult
from .image_extension import normalize_extension
from .queue_message import QueueMessage
from .task_status import TaskStatus

__all__ = ["CaptionResult", "QueueMessage", "TaskStatus", "normalize_extension"]
