"""Sprite sheet generation: pose guide + reference image -> sliced frames."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image, UnidentifiedImageError

from spriteloop.backend.base import SheetRequest
from spriteloop.models.figure import PoseGuideRequest
from spriteloop.pipeline.pose_guide import encode_png, render_pose_guide
from spriteloop.pipeline.prompts import build_sheet_prompt
from spriteloop.pipeline.slicing import save_frames, slice_sprite_sheet

if TYPE_CHECKING:
    from spriteloop.backend.base import GenerationBackend, ProgressCallback
    from spriteloop.config import AppConfig
    from spriteloop.models import ActionPreset, Archetype, Direction, SpriteStyle

logger = logging.getLogger(__name__)

_EXTENSIONS: dict[str, str] = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
}


class ReferenceImageError(ValueError):
    """Raised when the reference character image cannot be read."""


@dataclass
class SpriteSheetResult:
    """Files produced by one sheet generation."""

    action_id: str
    sheet_path: Path
    frame_paths: list[Path]
    prompt: str
    model: str
    pose_guide_path: Path | None = None
    metadata: dict[str, object] = field(default_factory=dict)


def read_reference_image(path: Path) -> tuple[bytes, str]:
    """Read a reference image and detect its MIME type from its content."""
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        msg = f"reference image not found: {path}"
        raise ReferenceImageError(msg) from None
    except PermissionError:
        msg = f"permission denied reading reference image: {path}"
        raise ReferenceImageError(msg) from None

    try:
        with Image.open(path) as img:
            mime_type = img.get_format_mimetype() or "image/png"
    except (UnidentifiedImageError, OSError) as exc:
        msg = f"reference image is not a readable image: {exc}"
        raise ReferenceImageError(msg) from None
    return data, mime_type


async def generate_sprite_sheet(
    reference: Path,
    action: ActionPreset,
    backend: GenerationBackend,
    config: AppConfig,
    *,
    style: SpriteStyle | None = None,
    direction: Direction | None = None,
    archetype: Archetype | None = None,
    positive: str = "",
    negative: str | None = None,
    use_pose_guide: bool | None = None,
    output_dir: Path | None = None,
    progress_callback: ProgressCallback | None = None,
) -> SpriteSheetResult:
    """Generate a 6-frame sprite sheet for *action* from one reference image.

    The steps are:

    1. Read the reference image and detect its MIME type.
    2. Render the procedural pose guide, unless disabled or the action has
       no guide.
    3. Build the text prompt (pose transfer or layout variant).
    4. Call the backend and save the returned sheet.
    5. Slice the sheet into frames and save them next to it.

    Unset keyword arguments fall back to ``config.generation``.
    """
    gen = config.generation
    style = style or gen.style
    direction = direction or gen.direction
    archetype = archetype or gen.archetype
    negative = gen.negative_prompt if negative is None else negative
    if use_pose_guide is None:
        use_pose_guide = gen.use_pose_guide
    with_guide = use_pose_guide and action.pose_guide

    output_dir = output_dir or config.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = f"{action.id.lower()}_{str(direction).lower()}"

    reference_bytes, mime_type = read_reference_image(reference)
    logger.info(
        "Generating '%s' (%s, %s, %s, pose guide=%s)",
        action.id, direction, archetype, style, with_guide,
    )

    guide_bytes: bytes | None = None
    guide_path: Path | None = None
    if with_guide:
        guide_request = PoseGuideRequest(
            action_id=action.id, direction=direction, archetype=archetype,
        )
        guide_bytes = encode_png(render_pose_guide(guide_request))
        guide_path = output_dir / f"{stem}_pose_guide.png"
        guide_path.write_bytes(guide_bytes)

    prompt = build_sheet_prompt(
        action,
        style,
        positive=positive,
        negative=negative,
        with_pose_guide=with_guide,
    )

    request = SheetRequest(
        prompt=prompt,
        reference_image=reference_bytes,
        reference_mime_type=mime_type,
        pose_guide=guide_bytes,
        aspect_ratio=config.gemini.aspect_ratio,
    )
    result = await backend.generate(request, progress_callback=progress_callback)

    sheet_path = output_dir / f"{stem}_sheet{_EXTENSIONS.get(result.mime_type, '.png')}"
    sheet_path.write_bytes(result.image)
    logger.info("Sprite sheet for '%s' -> %s", action.id, sheet_path)

    frames = slice_sprite_sheet(result.image)
    frame_paths = save_frames(frames, output_dir, stem)

    return SpriteSheetResult(
        action_id=action.id,
        sheet_path=sheet_path,
        frame_paths=frame_paths,
        prompt=prompt,
        model=result.model,
        pose_guide_path=guide_path,
        metadata=result.metadata,
    )
