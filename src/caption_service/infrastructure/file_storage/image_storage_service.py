"""
Image Storage Service

Stores submitted images under the shared image directory so that
workers can hand them to the captioning engine.

Responsibility:
    - Write image bytes at {image_dir}/{task_id}{extension}
    - Resolve the stored path for a task reference
    - Atomic writes (write to .tmp, then rename)
    - Implements ImageStorageProtocol from Application Layer

Architecture Notes:
    - Infrastructure Layer (file system operations)
    - Image directory must be visible to the API and to every worker
      (shared volume in multi-host deployments)
    - Images are never deleted by the service (cleanup is external)
"""

import logging
import os
from pathlib import Path
from typing import Iterable
from uuid import UUID

from caption_service.domain.captioning import normalize_extension
from caption_service.domain.shared.exceptions import (
    InfrastructureError,
    UnsupportedExtensionError,
)

# Configure logger for image storage operations
logger = logging.getLogger(__name__)


class ImageStorageService:
    """
    Local-filesystem image store.

    Storage Structure:
        {image_dir}/3fa85f64-5717-4562-b3fc-2c963f66afa6.png
        {image_dir}/a3bb189e-8bf9-3888-9912-ace4e6543002.jpg

    Examples:
        >>> storage = ImageStorageService(Path("/tmp/caption_service/images"))
        >>> path = await storage.save_image(task.id, ".png", data)
        >>> storage.image_exists(task.id, ".png")
        True
    """

    def __init__(self, image_dir: Path, allowed_extensions: Iterable[str]) -> None:
        """
        Args:
            image_dir: Directory holding submitted images (created if missing)
            allowed_extensions: Accepted extensions with leading dot

        Raises:
            OSError: If the directory cannot be created
        """
        self.image_dir = Path(image_dir)
        self.allowed_extensions = tuple(
            normalize_extension(ext) for ext in allowed_extensions
        )
        self.image_dir.mkdir(parents=True, exist_ok=True)

    def get_image_path(self, task_id: str, extension: str) -> Path:
        """
        Build the storage path of a task's image.

        Raises:
            ValueError: If task_id is not a UUID (prevents path traversal)
            UnsupportedExtensionError: If extension is not allowed
        """
        extension = normalize_extension(extension)
        if extension not in self.allowed_extensions:
            raise UnsupportedExtensionError(extension, self.allowed_extensions)

        # Raises ValueError for anything that is not a UUID
        task_uuid = UUID(task_id)
        return self.image_dir / f"{task_uuid}{extension}"

    def image_exists(self, task_id: str, extension: str) -> bool:
        exists = self.get_image_path(task_id, extension).is_file()
        logger.debug(f"Checking image existence: {task_id}{extension} -> {exists}")
        return exists

    async def save_image(self, task_id: str, extension: str, data: bytes) -> Path:
        """
        Store image bytes for a task.

        Args:
            task_id: Task identifier (UUID string)
            extension: Image extension with leading dot
            data: Raw image bytes

        Returns:
            Path of the stored image

        Raises:
            UnsupportedExtensionError: If extension is not allowed
            InfrastructureError: If the write fails
        """
        file_path = self.get_image_path(task_id, extension)

        try:
            self._atomic_write_file(file_path, data)
        except OSError as e:
            logger.error(f"Failed to store image {file_path.name}: {e}")
            raise InfrastructureError(
                f"Image storage unavailable for task {task_id}", original_error=e
            ) from e

        logger.info(f"Stored image {file_path.name} ({len(data)} bytes)")
        return file_path

    def _atomic_write_file(self, file_path: Path, data: bytes) -> None:
        """
        Write file atomically using a temporary file.

        The final file is either fully written or not present at all,
        so a worker never reads a partial image.
        """
        tmp_path = file_path.with_suffix(file_path.suffix + ".tmp")
        try:
            tmp_path.write_bytes(data)
            os.replace(tmp_path, file_path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

        try:
            os.chmod(file_path, 0o644)
        except (OSError, NotImplementedError):
            logger.debug(f"Could not set permissions on {file_path}")
