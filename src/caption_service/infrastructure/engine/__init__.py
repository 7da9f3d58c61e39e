"""
Captioning Engine Infrastructure Module

Exports:
    - SubprocessCaptionEngine: Runs the external captioning program
"""

from .subprocess_caption_engine import SubprocessCaptionEngine

__all__ = ["SubprocessCaptionEngine"]
