"""Mock backend for testing and offline development."""

from __future__ import annotations

import asyncio
import colorsys
import io
import math
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw, ImageFont

from spriteloop.backend.base import SheetRequest, SheetResult
from spriteloop.pipeline.pose_guide import CANVAS_HEIGHT, CANVAS_WIDTH, FRAME_COUNT

if TYPE_CHECKING:
    from spriteloop.backend.base import ProgressCallback

MOCK_BACKGROUND = (30, 30, 30)


class MockBackend:
    """A mock backend that returns a debug sheet of six labelled bars.

    Useful for exercising slicing and the full pipeline without an API key.
    """

    def __init__(self, width: int = CANVAS_WIDTH, height: int = CANVAS_HEIGHT) -> None:
        self.width = width
        self.height = height

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass

    async def is_available(self) -> bool:
        return True

    async def generate(
        self,
        request: SheetRequest,
        progress_callback: ProgressCallback | None = None,
    ) -> SheetResult:
        total_steps = 10
        for step in range(total_steps):
            if progress_callback:
                progress_callback(step + 1, total_steps, f"Mock generating step {step + 1}")
            await asyncio.sleep(0.01)

        img = create_debug_sheet(self.width, self.height)
        buffer = io.BytesIO()
        img.save(buffer, "PNG")

        return SheetResult(
            image=buffer.getvalue(),
            mime_type="image/png",
            model="mock-v1",
            metadata={"backend": "mock", "pose_guide": request.pose_guide is not None},
        )

    async def refine_prompt(self, concept: str) -> str:
        return f"[MOCK] {concept.strip()}"

    async def get_models(self) -> list[str]:
        return ["mock-v1"]


def create_debug_sheet(
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
    frame_count: int = FRAME_COUNT,
) -> Image.Image:
    """Draw one coloured bar per frame, each labelled ``FRAME n``."""
    img = Image.new("RGB", (width, height), MOCK_BACKGROUND)
    draw = ImageDraw.Draw(img)
    frame_width = width // frame_count

    try:
        font = ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", 24)
    except OSError:
        font = ImageFont.load_default()

    for i in range(frame_count):
        bar_height = height * (0.5 + math.sin(i) * 0.2)
        hue = (i * 60 % 360) / 360
        r, g, b = colorsys.hls_to_rgb(hue, 0.5, 0.7)
        left = i * frame_width + frame_width // 4
        draw.rectangle(
            [left, height - bar_height, left + frame_width // 2, height - 1],
            fill=(int(r * 255), int(g * 255), int(b * 255)),
        )
        draw.text((i * frame_width + 20, 20), f"FRAME {i + 1}", fill=(255, 255, 255), font=font)

    return img
