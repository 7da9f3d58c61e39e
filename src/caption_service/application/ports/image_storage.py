"""
Image Storage Port

Protocol implemented by the blob store holding submitted images.
"""

from pathlib import Path
from typing import Protocol


class ImageStorageProtocol(Protocol):
    """
    Durable storage of submitted image content, keyed by task id.

    Contract:
        - save_image() is atomic: readers never see a partially written file
        - get_image_path() is pure path arithmetic (no I/O)
    """

    async def save_image(self, task_id: str, extension: str, data: bytes) -> Path: ...

    def get_image_path(self, task_id: str, extension: str) -> Path: ...

    def image_exists(self, task_id: str, extension: str) -> bool: ...
