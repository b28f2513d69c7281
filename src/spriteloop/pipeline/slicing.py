"""Sprite sheet slicing with Pillow."""

from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from spriteloop.pipeline.pose_guide import FRAME_COUNT

logger = logging.getLogger(__name__)


class SlicingError(ValueError):
    """Raised when a sprite sheet cannot be split into frames."""


def slice_sprite_sheet(
    sheet: bytes | Path | Image.Image,
    frame_count: int = FRAME_COUNT,
) -> list[Image.Image]:
    """Split a horizontal sprite sheet into *frame_count* equal frames.

    Parameters
    ----------
    sheet:
        Encoded image bytes, a path to an image file, or an open image.
    frame_count:
        Number of columns in the sheet.

    Returns
    -------
    list[Image.Image]
        Frames ordered left to right.  Each frame is ``floor(width /
        frame_count)`` pixels wide and as tall as the sheet; leftover pixels
        at the right edge are dropped.
    """
    if frame_count <= 0:
        msg = "frame_count must be positive"
        raise SlicingError(msg)

    img = _open_sheet(sheet)
    frame_width = img.width // frame_count
    if frame_width == 0:
        msg = f"Sheet is {img.width}px wide, too narrow for {frame_count} frames"
        raise SlicingError(msg)

    frames = [
        img.crop((i * frame_width, 0, (i + 1) * frame_width, img.height))
        for i in range(frame_count)
    ]
    logger.info(
        "Sliced sheet %dx%d into %d frames of %dx%d",
        img.width, img.height, frame_count, frame_width, img.height,
    )
    return frames


def save_frames(frames: list[Image.Image], output_dir: Path, stem: str) -> list[Path]:
    """Write frames as ``<stem>_frame_<n>.png`` (1-based) and return the paths."""
    output_dir.mkdir(parents=True, exist_ok=True)
    paths: list[Path] = []
    for idx, frame in enumerate(frames, start=1):
        path = output_dir / f"{stem}_frame_{idx}.png"
        frame.save(path, "PNG")
        paths.append(path)
    logger.debug("Saved %d frames to %s", len(paths), output_dir)
    return paths


def _open_sheet(sheet: bytes | Path | Image.Image) -> Image.Image:
    if isinstance(sheet, Image.Image):
        return sheet.convert("RGBA")
    source = io.BytesIO(sheet) if isinstance(sheet, bytes) else sheet
    try:
        with Image.open(source) as img:
            img.load()
            return img.convert("RGBA")
    except FileNotFoundError:
        msg = f"Sprite sheet not found: {sheet}"
        raise SlicingError(msg) from None
    except (UnidentifiedImageError, OSError) as exc:
        msg = f"Sprite sheet could not be decoded: {exc}"
        raise SlicingError(msg) from None
