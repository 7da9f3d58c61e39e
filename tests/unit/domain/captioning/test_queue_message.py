"""
Tests for QueueMessage, normalize_extension and the domain exceptions
surfaced to clients.
"""

import dataclasses

import pytest

from caption_service.domain.captioning import QueueMessage, normalize_extension
from caption_service.domain.shared.exceptions import (
    EngineFailedError,
    EngineTimeoutError,
    InfrastructureError,
    NotFoundError,
    ResultNotAvailableError,
    TaskNotFoundError,
    UnsupportedExtensionError,
    ValidationError,
)

TASK_ID = "3fa85f64-5717-4562-b3fc-2c963f66afa6"


# ============================================================================
# TESTS - normalize_extension
# ============================================================================


@pytest.mark.parametrize(
    "raw, expected",
    [
        (".png", ".png"),
        ("png", ".png"),
        (" .JPEG ", ".jpeg"),
        ("", ""),
    ],
)
def test_normalize_extension(raw, expected):
    assert normalize_extension(raw) == expected


# ============================================================================
# TESTS - QueueMessage
# ============================================================================


def test_queue_message_normalizes_extension():
    message = QueueMessage(task_id=TASK_ID, extension="PNG")

    assert message.extension == ".png"
    assert message.image_name == f"{TASK_ID}.png"


def test_queue_message_payload():
    message = QueueMessage(task_id=TASK_ID, extension=".jpg")

    assert message.to_payload() == {"task_id": TASK_ID, "extension": ".jpg"}
    assert QueueMessage.from_payload(message.to_payload()) == message


def test_queue_message_requires_task_id():
    with pytest.raises(ValueError):
        QueueMessage(task_id="", extension=".png")


def test_queue_message_is_immutable():
    message = QueueMessage(task_id=TASK_ID, extension=".png")

    with pytest.raises(dataclasses.FrozenInstanceError):
        message.task_id = "other"


# ============================================================================
# TESTS - Exceptions
# ============================================================================


def test_unsupported_extension_is_validation_error():
    exc = UnsupportedExtensionError(".pdf", (".png", ".jpg", ".jpeg"))

    assert isinstance(exc, ValidationError)
    assert ".pdf" in exc.message
    assert ".png" in exc.message


def test_not_found_errors_share_base():
    assert isinstance(TaskNotFoundError(TASK_ID), NotFoundError)
    assert isinstance(ResultNotAvailableError(TASK_ID, "Pending"), NotFoundError)
    assert TaskNotFoundError(TASK_ID).task_id == TASK_ID


def test_engine_timeout_message():
    exc = EngineTimeoutError(120)
    assert "timed out after 120s" in exc.message


def test_engine_failed_includes_exit_code_and_stderr():
    exc = EngineFailedError("engine exited", exit_code=2, stderr="Traceback ...")

    assert exc.exit_code == 2
    assert "2" in exc.message
    assert "Traceback" in exc.message


def test_infrastructure_error_keeps_original():
    original = ConnectionError("refused")
    exc = InfrastructureError("Redis down", original_error=original)

    assert exc.original_error is original
    assert "refused" in exc.message
