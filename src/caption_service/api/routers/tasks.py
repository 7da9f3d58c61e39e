"""
API Router for Captioning Tasks

Responsibility:
    HTTP interface for submitting images and polling their captioning tasks.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Depends on Application Layer (SubmitCaptionTaskUseCase, TaskStatusReader)
    - Domain exceptions are converted to ErrorResponse by the global handlers
      in api/main.py (400/413/404/503)
    - No business logic - pure HTTP concerns

Contains:
    - POST /upload               - Submit an image (multipart field "image")
    - GET  /{task_id}/status     - Current status
    - GET  /{task_id}/result     - Caption text (Success only)
    - GET  /{task_id}/error      - Diagnostic text (Failure only)

Polling endpoints send Cache-Control: no-cache so clients always see the
latest persisted status.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Path, Response, UploadFile, status
from pydantic import BaseModel, ConfigDict, Field

from caption_service.api.dependencies import get_status_reader, get_submit_use_case
from caption_service.api.schemas.common import ErrorResponse
from caption_service.application.queries import TaskStatusReader
from caption_service.application.services import SubmitCaptionTaskUseCase
from caption_service.domain.captioning import TaskStatus

# Configure logger
logger = logging.getLogger(__name__)

NO_CACHE = "no-cache"


# ============================================================================
# RESPONSE MODELS
# ============================================================================


class UploadResponse(BaseModel):
    """
    Response model for image submission.

    Attributes:
        task_id: Identifier to poll with
        status: Always "Pending" right after submission
        message: Human-readable confirmation
    """

    task_id: str = Field(description="Task identifier (UUID)")
    status: TaskStatus = Field(description="Task status after submission")
    message: str = Field(description="Human-readable confirmation")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "task_id": "3fa85f64-5717-4562-b3fc-2c963f66afa6",
                "status": "Pending",
                "message": "Image accepted for captioning",
            }
        }
    )


class TaskStatusResponse(BaseModel):
    """
    Response model for task status query.

    Attributes:
        task_id: Task identifier
        status: Pending / Processing / Success / Failure
        attempts: Times a worker started processing the task
        created_at: ISO timestamp of submission
        updated_at: ISO timestamp of last transition
    """

    task_id: str
    status: TaskStatus
    attempts: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class TaskResultResponse(BaseModel):
    task_id: str
    result: str = Field(description="Caption text")


class TaskErrorResponse(BaseModel):
    task_id: str
    error: str = Field(description="Diagnostic text of the failure")


router = APIRouter(
    tags=["tasks"],
    responses={
        404: {"model": ErrorResponse, "description": "Not Found"},
        503: {"model": ErrorResponse, "description": "Service Unavailable"},
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
    },
)


# ============================================================================
# ENDPOINTS
# ============================================================================


@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    response_model=UploadResponse,
    summary="Submit an image for captioning",
    description=(
        "Upload an image (.png, .jpg, .jpeg) and receive a task_id. "
        "Poll GET /api/{task_id}/status until the task is Success or Failure."
    ),
    responses={
        400: {
            "model": ErrorResponse,
            "description": "Bad Request - Unsupported extension or empty image",
        },
        413: {"model": ErrorResponse, "description": "Payload Too Large"},
    },
)
async def upload_image(
    response: Response,
    image: UploadFile = File(..., description="Image file to caption"),
    use_case: SubmitCaptionTaskUseCase = Depends(get_submit_use_case),
) -> UploadResponse:
    """
    Submit an image.

    Process Flow:
        1. Read uploaded bytes
        2. Delegate to SubmitCaptionTaskUseCase (validation, storage, enqueue)
        3. Return task_id with HTTP 201

    Examples:
        >>> curl -F "image=@cat.png" http://localhost:8000/api/upload
        {"task_id": "3fa85f64-...", "status": "Pending", "message": "..."}
    """
    data = await image.read()
    result = await use_case.execute(image_data=data, filename=image.filename)

    response.headers["Cache-Control"] = NO_CACHE
    return UploadResponse(
        task_id=result.task_id,
        status=TaskStatus(result.status),
        message=result.message,
    )


@router.get(
    "/{task_id}/status",
    response_model=TaskStatusResponse,
    summary="Get status of a captioning task",
)
async def get_task_status(
    response: Response,
    task_id: str = Path(..., description="Task id returned by POST /api/upload"),
    reader: TaskStatusReader = Depends(get_status_reader),
) -> TaskStatusResponse:
    task = reader.get_task(task_id)

    response.headers["Cache-Control"] = NO_CACHE
    return TaskStatusResponse(
        task_id=task.id,
        status=task.status,
        attempts=task.attempts,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


@router.get(
    "/{task_id}/result",
    response_model=TaskResultResponse,
    summary="Get caption of a succeeded task",
    description="Returns 404 unless the task status is Success.",
)
async def get_task_result(
    response: Response,
    task_id: str = Path(..., description="Task id returned by POST /api/upload"),
    reader: TaskStatusReader = Depends(get_status_reader),
) -> TaskResultResponse:
    result = reader.get_result(task_id)

    response.headers["Cache-Control"] = NO_CACHE
    return TaskResultResponse(task_id=task_id, result=result)


@router.get(
    "/{task_id}/error",
    response_model=TaskErrorResponse,
    summary="Get failure diagnostic of a failed task",
    description="Returns 404 unless the task status is Failure.",
)
async def get_task_error(
    response: Response,
    task_id: str = Path(..., description="Task id returned by POST /api/upload"),
    reader: TaskStatusReader = Depends(get_status_reader),
) -> TaskErrorResponse:
    error = reader.get_error(task_id)

    response.headers["Cache-Control"] = NO_CACHE
    return TaskErrorResponse(task_id=task_id, error=error)
