"""
Subprocess Captioning Engine

Runs the external captioning program for one image and turns its
output into a CaptionResult.

Responsibility:
    - Invoke the configured command with the image path as an argument
    - Bound each invocation with a hard timeout
    - Treat a non-zero exit status or empty output as failure

Invocation:
    {engine_command...} {engine_image_arg} {image_path}
    e.g. python generate.py --path_jpg /tmp/caption_service/images/<id>.png

    The command is an argument vector executed without a shell, so image
    paths are never interpreted by a shell. Captured stdout is the caption,
    stderr is kept as diagnostics.
"""

import logging
import os
import subprocess
import time
from pathlib import Path
from typing import Mapping, Optional, Sequence

from caption_service.domain.captioning import CaptionResult
from caption_service.domain.shared.exceptions import (
    EngineFailedError,
    EngineTimeoutError,
)

# Configure logger for this module
logger = logging.getLogger(__name__)

# Keep failure messages readable in status records
STDERR_TAIL_CHARS = 2000


class SubprocessCaptionEngine:
    """
    Captioning engine backed by an external program.

    Implements CaptionEngineProtocol from Application Layer.

    Examples:
        >>> engine = SubprocessCaptionEngine(
        ...     command=["python", "generate.py"],
        ...     image_arg="--path_jpg",
        ...     timeout_seconds=120,
        ... )
        >>> engine.caption(Path("/tmp/caption_service/images/abc.png")).text
        'a cat sitting on a couch'
    """

    def __init__(
        self,
        command: Sequence[str],
        image_arg: Optional[str] = "--path_jpg",
        timeout_seconds: float = 120.0,
        workdir: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Args:
            command: Executable plus fixed arguments
            image_arg: Flag preceding the image path (None/"" passes the path alone)
            timeout_seconds: Hard bound on one invocation
            workdir: Working directory for the child process
            env: Extra environment for the child; PATH is inherited
        """
        if not command:
            raise ValueError("Engine command must not be empty")
        if timeout_seconds <= 0:
            raise ValueError("Engine timeout must be positive")

        self.command = list(command)
        self.image_arg = image_arg
        self.timeout_seconds = timeout_seconds
        self.workdir = Path(workdir) if workdir else None
        self.env = dict(env or {})

    def build_argv(self, image_path: Path) -> list[str]:
        argv = list(self.command)
        if self.image_arg:
            argv.append(self.image_arg)
        argv.append(str(image_path))
        return argv

    def _child_env(self) -> dict[str, str]:
        env = {"PATH": os.environ.get("PATH", os.defpath)}
        env.update(self.env)
        return env

    def caption(self, image_path: Path) -> CaptionResult:
        """
        Caption one image.

        Args:
            image_path: Absolute path of a stored image

        Returns:
            CaptionResult with the trimmed stdout as caption text

        Raises:
            EngineTimeoutError: If the process exceeds the timeout (it is killed)
            EngineFailedError: If the process cannot start or be read, exits non-zero,
                or prints nothing
        """
        argv = self.build_argv(image_path)
        logger.info(f"Running captioning engine for {image_path.name}")
        start_time = time.monotonic()

        try:
            completed = subprocess.run(
                argv,
                cwd=self.workdir,
                env=self._child_env(),
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout_seconds,
                shell=False,
            )
        except subprocess.TimeoutExpired as e:
            logger.warning(
                f"Captioning engine timed out after {self.timeout_seconds}s "
                f"for {image_path.name}"
            )
            raise EngineTimeoutError(self.timeout_seconds) from e
        except OSError as e:
            logger.error(f"Captioning engine could not start: {e}")
            raise EngineFailedError(f"Captioning engine could not start: {e}") from e
        except Exception as e:
            logger.exception(f"Captioning engine invocation failed for {image_path.name}")
            raise EngineFailedError(
                f"Captioning engine invocation failed: {e.__class__.__name__}: {e}"
            ) from e

        duration = time.monotonic() - start_time
        stderr = completed.stderr or ""
        text = (completed.stdout or "").strip()

        if completed.returncode != 0:
            logger.warning(
                f"Captioning engine exited with {completed.returncode} "
                f"for {image_path.name}"
            )
            raise EngineFailedError(
                f"Captioning engine exited with status {completed.returncode}",
                exit_code=completed.returncode,
                stderr=stderr[-STDERR_TAIL_CHARS:],
            )

        if not text:
            logger.warning(f"Captioning engine produced no caption for {image_path.name}")
            raise EngineFailedError(
                "Captioning engine produced no output",
                exit_code=completed.returncode,
                stderr=stderr[-STDERR_TAIL_CHARS:],
            )

        logger.info(f"Captioned {image_path.name} in {duration:.2f}s")
        return CaptionResult(text=text, diagnostics=stderr, duration_seconds=duration)
