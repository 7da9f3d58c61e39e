"""
Tests for CaptionTask entity and TaskStatus lifecycle.
Covers: creation, forward-only transitions, terminal immutability,
result/error exclusivity, attempts, serialization.
"""

from uuid import UUID

import pytest

from caption_service.domain.captioning import CaptionTask, TaskStatus
from caption_service.domain.shared.exceptions import InvalidStatusTransitionError


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def task():
    return CaptionTask.new(".png")


@pytest.fixture
def processing_task(task):
    task.transition_to(TaskStatus.PROCESSING)
    return task


# ============================================================================
# TESTS - TaskStatus
# ============================================================================


def test_status_wire_values():
    """Test status values match the external status keywords."""
    assert [s.value for s in TaskStatus] == [
        "Pending",
        "Processing",
        "Success",
        "Failure",
    ]


@pytest.mark.parametrize(
    "status, terminal",
    [
        (TaskStatus.PENDING, False),
        (TaskStatus.PROCESSING, False),
        (TaskStatus.SUCCESS, True),
        (TaskStatus.FAILURE, True),
    ],
)
def test_status_is_terminal(status, terminal):
    assert status.is_terminal is terminal


def test_terminal_statuses_allow_no_transition():
    for terminal in (TaskStatus.SUCCESS, TaskStatus.FAILURE):
        for target in TaskStatus:
            assert not terminal.can_transition_to(target)


def test_pending_cannot_skip_processing():
    assert not TaskStatus.PENDING.can_transition_to(TaskStatus.SUCCESS)
    assert not TaskStatus.PENDING.can_transition_to(TaskStatus.FAILURE)


# ============================================================================
# TESTS - Creation
# ============================================================================


def test_new_task_is_pending_with_uuid(task):
    """Test CaptionTask.new() creates a PENDING task with a UUID4 id."""
    assert task.status == TaskStatus.PENDING
    assert UUID(task.id).version == 4
    assert task.attempts == 0
    assert task.result is None
    assert task.error is None


def test_new_tasks_get_distinct_ids():
    ids = {CaptionTask.new(".jpg").id for _ in range(100)}
    assert len(ids) == 100


def test_extension_is_normalized():
    task = CaptionTask.new("JPG")
    assert task.extension == ".jpg"
    assert task.image_ref == f"{task.id}.jpg"


# ============================================================================
# TESTS - Transitions
# ============================================================================


def test_happy_path_to_success(processing_task):
    processing_task.transition_to(
        TaskStatus.SUCCESS, result="a cat sitting on a couch"
    )

    assert processing_task.status == TaskStatus.SUCCESS
    assert processing_task.result == "a cat sitting on a couch"
    assert processing_task.error is None
    assert processing_task.is_terminal


def test_happy_path_to_failure(processing_task):
    processing_task.transition_to(TaskStatus.FAILURE, error="engine exited with 1")

    assert processing_task.status == TaskStatus.FAILURE
    assert processing_task.error == "engine exited with 1"
    assert processing_task.result is None


def test_processing_increments_attempts(task):
    task.transition_to(TaskStatus.PROCESSING)
    assert task.attempts == 1

    # Redelivery of a task stuck in PROCESSING
    task.transition_to(TaskStatus.PROCESSING)
    assert task.attempts == 2
    assert task.status == TaskStatus.PROCESSING


def test_backward_transition_rejected(processing_task):
    with pytest.raises(InvalidStatusTransitionError) as exc_info:
        processing_task.transition_to(TaskStatus.PENDING)

    assert exc_info.value.current == "Processing"
    assert exc_info.value.requested == "Pending"


@pytest.mark.parametrize("target", list(TaskStatus))
def test_terminal_status_never_changes(processing_task, target):
    """Test a SUCCESS task rejects every further transition."""
    processing_task.transition_to(TaskStatus.SUCCESS, result="caption")

    kwargs = {}
    if target == TaskStatus.SUCCESS:
        kwargs = {"result": "other caption"}
    elif target == TaskStatus.FAILURE:
        kwargs = {"error": "late failure"}

    with pytest.raises(InvalidStatusTransitionError):
        processing_task.transition_to(target, **kwargs)

    assert processing_task.status == TaskStatus.SUCCESS
    assert processing_task.result == "caption"


def test_success_requires_result(processing_task):
    with pytest.raises(ValueError, match="SUCCESS requires a result"):
        processing_task.transition_to(TaskStatus.SUCCESS)


def test_success_rejects_error(processing_task):
    with pytest.raises(ValueError):
        processing_task.transition_to(TaskStatus.SUCCESS, result="x", error="y")


def test_failure_requires_error(processing_task):
    with pytest.raises(ValueError, match="FAILURE requires an error"):
        processing_task.transition_to(TaskStatus.FAILURE)


def test_processing_carries_no_payload(task):
    with pytest.raises(ValueError):
        task.transition_to(TaskStatus.PROCESSING, result="too early")


def test_failed_validation_leaves_task_unchanged(processing_task):
    with pytest.raises(ValueError):
        processing_task.transition_to(TaskStatus.SUCCESS)

    assert processing_task.status == TaskStatus.PROCESSING


# ============================================================================
# TESTS - Serialization
# ============================================================================


def test_to_dict_uses_string_values(processing_task):
    data = processing_task.to_dict()

    assert data["status"] == "Processing"
    assert data["attempts"] == "1"
    assert data["image_ref"] == processing_task.image_ref
    assert "result" not in data
    assert "error" not in data
    assert all(isinstance(value, str) for value in data.values())


def test_from_dict_restores_terminal_task(processing_task):
    processing_task.transition_to(TaskStatus.FAILURE, error="timed out")

    restored = CaptionTask.from_dict(processing_task.to_dict())

    assert restored.id == processing_task.id
    assert restored.status == TaskStatus.FAILURE
    assert restored.error == "timed out"
    assert restored.result is None
    assert restored.attempts == 1
    assert restored.updated_at == processing_task.updated_at
