"""
Domain Layer Exceptions

Exception hierarchy shared by every layer of the captioning service.

Responsibility:
    - Base exception class for domain errors
    - One branch per error class of the task lifecycle
    - Type-safe error handling across layers (API maps branches to HTTP codes)

Taxonomy:
    - ValidationError: bad submission input, no task created (HTTP 400/413)
    - NotFoundError: unknown task id or query invalid for current state (HTTP 404)
    - ProcessingError: engine failed or timed out, recorded as task Failure
    - InfrastructureError: Redis / broker unreachable (HTTP 503, worker retries)
    - InvalidStatusTransitionError: attempted backward or terminal overwrite
"""


class DomainException(Exception):
    """
    Base exception for all captioning service errors.

    Usage:
        - Catch this in Application Layer to handle all domain errors
        - API Layer converts subclasses to appropriate HTTP status codes

    Examples:
        >>> raise DomainException("Business rule violation")
    """

    def __init__(self, message: str) -> None:
        """
        Initialize domain exception with error message.

        Args:
            message: Human-readable error description
        """
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        """String representation of the exception."""
        return f"{self.__class__.__name__}: {self.message}"

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"{self.__class__.__name__}(message={self.message!r})"


# ============================================================================
# VALIDATION ERRORS (synchronous, surfaced to submitter)
# ============================================================================


class ValidationError(DomainException):
    """Raised when a submission is rejected before any side effect."""


class UnsupportedExtensionError(ValidationError):
    """
    Raised when the image extension is outside the allowed set.

    Attributes:
        extension: Rejected extension as received
        allowed_extensions: Extensions that would have been accepted

    Examples:
        >>> raise UnsupportedExtensionError(".pdf", (".png", ".jpg", ".jpeg"))
    """

    def __init__(self, extension: str, allowed_extensions: tuple[str, ...]) -> None:
        self.extension = extension
        self.allowed_extensions = allowed_extensions
        super().__init__(
            f"Extension {extension or '<none>'} not supported. "
            f"Expected one of {' '.join(allowed_extensions)}"
        )


class EmptyImageError(ValidationError):
    """Raised when submitted image content is empty."""

    def __init__(self, message: str = "Image content is empty") -> None:
        super().__init__(message)


class ImageTooLargeError(ValidationError):
    """
    Raised when submitted image exceeds the configured size limit.

    Attributes:
        size_bytes: Actual image size in bytes
        max_size_bytes: Maximum allowed size in bytes
    """

    def __init__(self, size_bytes: int, max_size_bytes: int) -> None:
        self.size_bytes = size_bytes
        self.max_size_bytes = max_size_bytes
        size_mb = size_bytes / (1024 * 1024)
        max_mb = max_size_bytes / (1024 * 1024)
        super().__init__(
            f"Image size {size_mb:.2f}MB exceeds maximum {max_mb:.2f}MB"
        )


# ============================================================================
# NOT FOUND ERRORS (synchronous, surfaced to polling caller)
# ============================================================================


class NotFoundError(DomainException):
    """
    Raised when a task id is unknown or the requested data does not exist yet.

    Attributes:
        task_id: Task identifier that was queried
    """

    def __init__(self, message: str, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(message)


class TaskNotFoundError(NotFoundError):
    """Raised when no status record exists for the task id."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"No task with id {task_id} found", task_id)


class ResultNotAvailableError(NotFoundError):
    """Raised when a result is requested but the task has not succeeded."""

    def __init__(self, task_id: str, status: str) -> None:
        self.status = status
        super().__init__(
            f"Task {task_id} has no result (status: {status})", task_id
        )


class ErrorNotAvailableError(NotFoundError):
    """Raised when an error is requested but the task has not failed."""

    def __init__(self, task_id: str, status: str) -> None:
        self.status = status
        super().__init__(
            f"Task {task_id} has no error (status: {status})", task_id
        )


# ============================================================================
# PROCESSING ERRORS (asynchronous, recorded as Failure)
# ============================================================================


class ProcessingError(DomainException):
    """
    Raised by the worker side when a task cannot produce a caption.

    Never propagated past the worker: the message becomes the task's
    error text and the task ends in Failure.
    """


class EngineFailedError(ProcessingError):
    """
    Raised when the captioning engine exits abnormally or prints no caption.

    Attributes:
        exit_code: Engine process exit code (None if it never started)
        stderr: Captured diagnostic output (tail)
    """

    def __init__(
        self, message: str, exit_code: int | None = None, stderr: str = ""
    ) -> None:
        self.exit_code = exit_code
        self.stderr = stderr
        detailed_parts = [message]
        if exit_code is not None:
            detailed_parts.append(f"exit code {exit_code}")
        if stderr:
            detailed_parts.append(stderr)
        super().__init__(" | ".join(detailed_parts))


class EngineTimeoutError(ProcessingError):
    """
    Raised when the captioning engine exceeds its execution budget.

    Attributes:
        timeout_seconds: Budget that was exceeded
    """

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Captioning engine timed out after {timeout_seconds:g}s"
        )


class ImageMissingError(ProcessingError):
    """Raised when the stored image for a task cannot be found."""

    def __init__(self, image_ref: str) -> None:
        self.image_ref = image_ref
        super().__init__(f"Stored image not found: {image_ref}")


# ============================================================================
# INFRASTRUCTURE ERRORS (retryable)
# ============================================================================


class InfrastructureError(DomainException):
    """
    Raised when a store or the broker cannot be reached.

    Surfaced to the submitter (no durable record may exist) and retried
    with backoff by the worker.

    Attributes:
        original_error: Underlying client exception (optional)

    Examples:
        >>> raise InfrastructureError(
        ...     "Status store unavailable",
        ...     original_error=ConnectionError("Connection refused"),
        ... )
    """

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        self.original_error = original_error
        detailed_parts = [message]
        if original_error:
            detailed_parts.append(
                f"Original error: {type(original_error).__name__}: {original_error}"
            )
        super().__init__(" | ".join(detailed_parts))


# ============================================================================
# STATE MACHINE ERRORS
# ============================================================================


class InvalidStatusTransitionError(DomainException):
    """
    Raised when a status change would move a task backwards or overwrite
    a terminal state.

    Attributes:
        task_id: Task identifier
        current: Current status value
        requested: Requested status value
    """

    def __init__(self, task_id: str, current: str, requested: str) -> None:
        self.task_id = task_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Task {task_id} cannot move from {current} to {requested}"
        )
