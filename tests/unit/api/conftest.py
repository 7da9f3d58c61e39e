"""
Common fixtures for API unit tests.

Provides shared test utilities:
- FastAPI app with use cases wired to in-memory fakes
- TestClient
- Tasks in each lifecycle state
"""

import pytest
from fastapi.testclient import TestClient

from caption_service.api.dependencies import get_status_reader, get_submit_use_case
from caption_service.api.main import create_app
from caption_service.application.queries import TaskStatusReader
from caption_service.application.services import SubmitCaptionTaskUseCase
from caption_service.domain.captioning import CaptionTask, TaskStatus


@pytest.fixture
def app(settings, image_storage, status_store, task_queue):
    """
    FastAPI app whose use cases run against fakes.

    Image storage is real (tmp dir); status store and queue are in-memory.
    """
    app = create_app(settings)
    app.dependency_overrides[get_submit_use_case] = lambda: SubmitCaptionTaskUseCase(
        image_storage=image_storage,
        status_store=status_store,
        task_queue=task_queue,
        settings=settings,
    )
    app.dependency_overrides[get_status_reader] = lambda: TaskStatusReader(status_store)
    return app


@pytest.fixture
def client(app):
    """TestClient without lifespan (no Redis or broker pools to close)."""
    return TestClient(app)


@pytest.fixture
def pending_task(status_store):
    task = CaptionTask.new(".png")
    status_store.create(task)
    return task


@pytest.fixture
def succeeded_task(status_store):
    task = CaptionTask.new(".png")
    status_store.create(task)
    status_store.transition(task.id, TaskStatus.PROCESSING)
    status_store.transition(
        task.id, TaskStatus.SUCCESS, result="a cat sitting on a couch"
    )
    return task


@pytest.fixture
def failed_task(status_store):
    task = CaptionTask.new(".jpg")
    status_store.create(task)
    status_store.transition(task.id, TaskStatus.PROCESSING)
    status_store.transition(
        task.id, TaskStatus.FAILURE, error="Captioning engine timed out after 120s"
    )
    return task
