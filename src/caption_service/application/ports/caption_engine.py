"""
Caption Engine Port

Protocol implemented by the captioning engine adapter.
"""

from pathlib import Path
from typing import Protocol

from caption_service.domain.captioning import CaptionResult


class CaptionEngineProtocol(Protocol):
    """
    Opaque captioning function invoked by the worker.

    Contract:
        - caption() blocks for at most the configured timeout
        - Returns CaptionResult on success
        - Raises ProcessingError subclasses (EngineFailedError,
          EngineTimeoutError) on failure
    """

    def caption(self, image_path: Path) -> CaptionResult: ...
