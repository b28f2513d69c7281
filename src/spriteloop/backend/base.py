"""Backend protocol and shared types for sprite sheet generation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, TypeAlias, runtime_checkable


class GenerationError(RuntimeError):
    """Raised when a backend cannot produce a sprite sheet."""


class GenerationRefusedError(GenerationError):
    """Raised when the model answers with text instead of an image."""

    def __init__(self, refusal: str) -> None:
        self.refusal = refusal.strip()
        super().__init__(
            f"Generation Refused: {self.refusal[:150]}... "
            "(Try a simpler prompt or different image)"
        )


@dataclass
class SheetRequest:
    """A request to generate one sprite sheet."""

    prompt: str
    reference_image: bytes
    reference_mime_type: str = "image/png"
    # Rendered pose guide PNG, sent as the second image when present.
    pose_guide: bytes | None = None
    aspect_ratio: str = "16:9"
    extra_params: dict[str, object] = field(default_factory=dict)


@dataclass
class SheetResult:
    """Result from a generation request."""

    image: bytes
    mime_type: str
    model: str
    metadata: dict[str, object] = field(default_factory=dict)


@runtime_checkable
class GenerationBackend(Protocol):
    """Protocol for sprite sheet generation backends."""

    async def connect(self) -> None:
        """Prepare the backend client."""
        ...

    async def disconnect(self) -> None:
        """Release the backend client."""
        ...

    async def is_available(self) -> bool:
        """Check if the backend is reachable and ready."""
        ...

    async def generate(
        self,
        request: SheetRequest,
        progress_callback: ProgressCallback | None = None,
    ) -> SheetResult:
        """Generate a sprite sheet from a request."""
        ...

    async def refine_prompt(self, concept: str) -> str:
        """Turn a free-form concept into a technical animation description."""
        ...

    async def get_models(self) -> list[str]:
        """List the models this backend talks to."""
        ...


# Callback type for generation progress updates
ProgressCallback: TypeAlias = Callable[[int, int, str], None]  # (step, total, status)
