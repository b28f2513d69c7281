"""Google Gemini backend for sprite sheet generation."""

from __future__ import annotations

import base64
import logging
import os
from typing import TYPE_CHECKING, Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from spriteloop.backend.base import (
    GenerationError,
    GenerationRefusedError,
    SheetRequest,
    SheetResult,
)
from spriteloop.pipeline.prompts import REFINE_SYSTEM_INSTRUCTION

if TYPE_CHECKING:
    from spriteloop.backend.base import ProgressCallback
    from spriteloop.config import GeminiSettings

logger = logging.getLogger(__name__)

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


class GeminiBackend:
    """Generation backend using the Gemini image and reasoning models.

    The request is sent as a single user turn ordered text, reference
    character, then pose guide, which is the order the prompt refers to as
    IMAGE 1 and IMAGE 2.
    """

    def __init__(self, settings: GeminiSettings) -> None:
        self._settings = settings
        self._api_key: str = ""
        self._client: genai.Client | None = None

    async def connect(self) -> None:
        """Resolve the API key and build the client."""
        self._api_key = self._settings.api_key or next(
            (os.environ[name] for name in API_KEY_ENV_VARS if os.environ.get(name)), "",
        )
        if self._api_key:
            self._client = genai.Client(api_key=self._api_key)

    async def disconnect(self) -> None:
        """Drop the client; the SDK holds no persistent connection for us."""
        self._client = None

    async def is_available(self) -> bool:
        """Check if the image model is reachable with the configured key."""
        if self._client is None:
            logger.warning(
                "Gemini API key not configured (set GEMINI_API_KEY or config.gemini.api_key)",
            )
            return False
        try:
            await self._client.aio.models.get(model=self._settings.image_model)
        except (genai_errors.APIError, httpx.HTTPError, OSError) as exc:
            logger.warning("Gemini unavailable: %s", exc)
            return False
        return True

    async def generate(
        self,
        request: SheetRequest,
        progress_callback: ProgressCallback | None = None,
    ) -> SheetResult:
        """Generate a sprite sheet image."""
        client = self._require_client()
        model = self._settings.image_model

        parts = [
            types.Part.from_text(text=request.prompt),
            types.Part.from_bytes(
                data=request.reference_image, mime_type=request.reference_mime_type,
            ),
        ]
        if request.pose_guide is not None:
            parts.append(types.Part.from_bytes(data=request.pose_guide, mime_type="image/png"))

        config = types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=request.aspect_ratio),
        )

        if progress_callback:
            progress_callback(1, 3, f"Submitting to {model}")

        try:
            response = await client.aio.models.generate_content(
                model=model,
                contents=[types.Content(role="user", parts=parts)],
                config=config,
            )
        except (genai_errors.APIError, httpx.HTTPError) as exc:
            logger.error("Sprite generation error: %s", exc)
            msg = f"Gemini request failed: {exc}"
            raise GenerationError(msg) from exc

        if progress_callback:
            progress_callback(2, 3, "Reading response")

        image, mime_type = extract_image(response)

        if progress_callback:
            progress_callback(3, 3, "Complete")

        return SheetResult(
            image=image,
            mime_type=mime_type,
            model=model,
            metadata={"backend": "gemini", "pose_guide": request.pose_guide is not None},
        )

    async def refine_prompt(self, concept: str) -> str:
        """Ask the reasoning model for a technical animation description."""
        client = self._require_client()
        config = types.GenerateContentConfig(
            system_instruction=REFINE_SYSTEM_INSTRUCTION,
            thinking_config=types.ThinkingConfig(
                thinking_budget=self._settings.thinking_budget,
            ),
        )
        try:
            response = await client.aio.models.generate_content(
                model=self._settings.reasoning_model,
                contents=f"Concept: {concept}",
                config=config,
            )
        except (genai_errors.APIError, httpx.HTTPError) as exc:
            logger.error("Reasoning error: %s", exc)
            msg = f"Prompt refinement failed: {exc}"
            raise GenerationError(msg) from exc
        return response.text or ""

    async def get_models(self) -> list[str]:
        """Return the configured Gemini models."""
        return [self._settings.image_model, self._settings.reasoning_model]

    def _require_client(self) -> genai.Client:
        if self._client is None:
            msg = "Gemini API key not found (set GEMINI_API_KEY or config.gemini.api_key)"
            raise GenerationError(msg)
        return self._client


def extract_image(response: Any) -> tuple[bytes, str]:
    """Pull the first inline image out of a ``generate_content`` response.

    Raises
    ------
    GenerationRefusedError
        If the response carries only text (the model declined).
    GenerationError
        If the response carries neither an image nor text.
    """
    candidates = getattr(response, "candidates", None) or []

    for candidate in candidates:
        for part in _parts(candidate):
            inline = getattr(part, "inline_data", None)
            data = getattr(inline, "data", None) if inline is not None else None
            if data:
                mime_type = getattr(inline, "mime_type", None) or "image/png"
                if isinstance(data, str):
                    data = base64.b64decode(data)
                return bytes(data), mime_type

    refusal = " ".join(
        part.text
        for candidate in candidates
        for part in _parts(candidate)
        if getattr(part, "text", None)
    )
    if refusal:
        logger.warning("Model refusal: %s", refusal)
        raise GenerationRefusedError(refusal)

    msg = "No image data found. The model may have filtered the output silently."
    raise GenerationError(msg)


def _parts(candidate: Any) -> list[Any]:
    content = getattr(candidate, "content", None)
    return list(getattr(content, "parts", None) or [])
