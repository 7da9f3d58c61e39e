"""
Pytest Configuration and Shared Fixtures

Fixtures shared across unit and integration tests.

Fixtures:
    - settings: Settings pointing at a temporary image directory and a
      Python one-liner as the captioning engine
    - image_storage: ImageStorageService on the temporary directory
    - status_store / task_queue / caption_engine: in-memory port fakes
    - png_bytes / jpg_bytes: small image payloads

Usage:
    def test_something(settings, status_store):
        ...
"""

import logging
import sys

import pytest

from caption_service.config import Settings
from caption_service.infrastructure.file_storage import ImageStorageService
from tests.fakes import FakeCaptionEngine, InMemoryTaskStatusStore, RecordingTaskQueue

# Configure logger for tests
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

CAT_CAPTION = "a cat sitting on a couch"


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================


@pytest.fixture
def settings(tmp_path) -> Settings:
    """
    Settings isolated to the test's temporary directory.

    The engine prints a fixed caption; extra arguments (--path_jpg <path>)
    end up in sys.argv of the child and are ignored.
    """
    return Settings(
        image_dir=tmp_path / "images",
        engine_command=[sys.executable, "-c", f"print({CAT_CAPTION!r})"],
        engine_timeout_seconds=10,
        max_image_size_mb=1,
    )


# ============================================================================
# PORT FIXTURES
# ============================================================================


@pytest.fixture
def image_storage(settings) -> ImageStorageService:
    return ImageStorageService(settings.image_dir, settings.allowed_extensions)


@pytest.fixture
def status_store() -> InMemoryTaskStatusStore:
    return InMemoryTaskStatusStore()


@pytest.fixture
def task_queue() -> RecordingTaskQueue:
    return RecordingTaskQueue()


@pytest.fixture
def caption_engine() -> FakeCaptionEngine:
    return FakeCaptionEngine(text=CAT_CAPTION)


# ============================================================================
# IMAGE FIXTURES
# ============================================================================


@pytest.fixture
def png_bytes() -> bytes:
    """Minimal PNG signature plus padding (content is never decoded)."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def jpg_bytes() -> bytes:
    return b"\xff\xd8\xff\xe0" + b"\x00" * 64
