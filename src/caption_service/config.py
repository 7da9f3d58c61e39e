"""
Service Configuration

Single configuration object shared by the API process and Celery workers.

Responsibility:
    - Read environment variables (and .env file) once at startup
    - Provide typed defaults for every tunable value
    - Be passed explicitly to each component at construction

Architecture Notes:
    - No module-level mutable globals: components receive a Settings instance
    - Engine environment is collected from ENGINE_ENV_* variables so the
      child process never inherits the full service environment

Examples:
    >>> settings = Settings.from_env()
    >>> settings.task_queue_name
    'task_queue'
    >>> settings.is_allowed_extension(".PNG")
    True
"""

import os
import shlex
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from caption_service.domain.captioning.value_objects.image_extension import (
    normalize_extension,
)

DEFAULT_ALLOWED_EXTENSIONS = (".png", ".jpg", ".jpeg")
ENGINE_ENV_PREFIX = "ENGINE_ENV_"


class Settings(BaseModel):
    """
    Typed configuration for the captioning service.

    Attributes:
        redis_host: Redis hostname for the status store
        redis_port: Redis port
        redis_db: Redis database number holding task records
        redis_max_connections: Connection pool size per process
        redis_timeout: Socket/connect timeout in seconds
        redis_retry_attempts: PING attempts before giving up on startup
        celery_broker_url: Broker URL for the task queue
        celery_result_backend: Celery result backend URL (diagnostics only)
        task_queue_name: Durable queue carrying task references
        broker_visibility_timeout: Seconds before an unacknowledged message is redelivered
        image_dir: Directory holding submitted images
        allowed_extensions: Accepted image extensions (lower-case, leading dot)
        max_image_size_mb: Upper bound for a single submitted image
        engine_command: Executable plus fixed arguments of the captioning engine
        engine_image_arg: Flag placed before the image path
        engine_workdir: Working directory for the engine process
        engine_env: Environment passed to the engine process
        engine_timeout_seconds: Hard bound on a single engine invocation
        worker_max_retries: Retries of a message on infrastructure errors
        worker_retry_backoff_max: Cap (seconds) for exponential retry backoff
        log_level: Root log level name
    """

    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_max_connections: int = 10
    redis_timeout: int = 5
    redis_retry_attempts: int = 3

    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/1"
    task_queue_name: str = "task_queue"
    broker_visibility_timeout: int = 3600

    image_dir: Path = Path("/tmp/caption_service/images")
    allowed_extensions: tuple[str, ...] = DEFAULT_ALLOWED_EXTENSIONS
    max_image_size_mb: int = 20

    engine_command: list[str] = Field(
        default_factory=lambda: ["python", "generate.py"]
    )
    engine_image_arg: str = "--path_jpg"
    engine_workdir: Optional[Path] = None
    engine_env: dict[str, str] = Field(default_factory=dict)
    engine_timeout_seconds: float = Field(default=120.0, gt=0)

    worker_max_retries: int = Field(default=5, ge=0)
    worker_retry_backoff_max: int = Field(default=300, gt=0)

    log_level: str = "INFO"

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, dotenv: bool = True
    ) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)
            dotenv: Load a .env file into os.environ first

        Returns:
            Settings instance with environment overrides applied
        """
        if dotenv and environ is None:
            load_dotenv()
        env = os.environ if environ is None else environ

        values: dict = {}
        simple_fields = {
            "REDIS_HOST": "redis_host",
            "REDIS_PORT": "redis_port",
            "REDIS_DB": "redis_db",
            "REDIS_MAX_CONNECTIONS": "redis_max_connections",
            "REDIS_TIMEOUT": "redis_timeout",
            "REDIS_RETRY_ATTEMPTS": "redis_retry_attempts",
            "CELERY_BROKER_URL": "celery_broker_url",
            "CELERY_RESULT_BACKEND": "celery_result_backend",
            "TASK_QUEUE_NAME": "task_queue_name",
            "BROKER_VISIBILITY_TIMEOUT": "broker_visibility_timeout",
            "IMAGE_DIR": "image_dir",
            "MAX_IMAGE_SIZE_MB": "max_image_size_mb",
            "ENGINE_IMAGE_ARG": "engine_image_arg",
            "ENGINE_WORKDIR": "engine_workdir",
            "ENGINE_TIMEOUT_SECONDS": "engine_timeout_seconds",
            "WORKER_MAX_RETRIES": "worker_max_retries",
            "WORKER_RETRY_BACKOFF_MAX": "worker_retry_backoff_max",
            "LOG_LEVEL": "log_level",
        }
        for env_name, field_name in simple_fields.items():
            if env.get(env_name):
                values[field_name] = env[env_name]

        if env.get("ALLOWED_EXTENSIONS"):
            values["allowed_extensions"] = tuple(
                normalize_extension(ext)
                for ext in env["ALLOWED_EXTENSIONS"].split(",")
                if ext.strip()
            )

        if env.get("ENGINE_COMMAND"):
            values["engine_command"] = shlex.split(env["ENGINE_COMMAND"])

        engine_env = {
            name[len(ENGINE_ENV_PREFIX):]: value
            for name, value in env.items()
            if name.startswith(ENGINE_ENV_PREFIX)
        }
        if engine_env:
            values["engine_env"] = engine_env

        return cls(**values)

    @property
    def max_image_size_bytes(self) -> int:
        return self.max_image_size_mb * 1024 * 1024

    @property
    def worker_hard_time_limit(self) -> int:
        """Celery hard limit, kept above the engine timeout as a backstop."""
        return int(self.engine_timeout_seconds) + 30

    def is_allowed_extension(self, extension: str) -> bool:
        return normalize_extension(extension) in self.allowed_extensions
