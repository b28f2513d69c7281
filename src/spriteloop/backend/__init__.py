"""Sprite sheet generation backends."""

from spriteloop.backend.base import (
    GenerationBackend,
    GenerationError,
    GenerationRefusedError,
    SheetRequest,
    SheetResult,
)
from spriteloop.backend.gemini import GeminiBackend
from spriteloop.backend.mock import MockBackend

__all__ = [
    "GeminiBackend",
    "GenerationBackend",
    "GenerationError",
    "GenerationRefusedError",
    "MockBackend",
    "SheetRequest",
    "SheetResult",
]
