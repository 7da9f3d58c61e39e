"""
CaptionResult Value Object.

Output of one successful captioning engine invocation.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CaptionResult:
    """
    Caption text produced by the engine plus any diagnostics it printed.

    Attributes:
        text: Caption text (stdout of the engine, stripped)
        diagnostics: Anything the engine wrote to stderr while succeeding
        duration_seconds: Wall time of the invocation
    """

    text: str
    diagnostics: str = ""
    duration_seconds: float = 0.0
