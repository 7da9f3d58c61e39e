from .caption_task import CaptionTask

__all__ = ["CaptionTask"]
