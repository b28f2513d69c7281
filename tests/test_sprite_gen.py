"""Tests for the end-to-end sprite sheet generation pipeline."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from spriteloop.backend.base import GenerationRefusedError, SheetRequest, SheetResult
from spriteloop.backend.mock import MockBackend
from spriteloop.config import AppConfig
from spriteloop.models import Archetype, Direction, SpriteStyle, get_action
from spriteloop.pipeline.pose_guide import synthesize
from spriteloop.pipeline.sprite_gen import (
    ReferenceImageError,
    generate_sprite_sheet,
    read_reference_image,
)


class RecordingBackend(MockBackend):
    """Mock backend that remembers the last request it saw."""

    def __init__(self) -> None:
        super().__init__(width=600, height=100)
        self.requests: list[SheetRequest] = []

    async def generate(self, request, progress_callback=None) -> SheetResult:
        self.requests.append(request)
        return await super().generate(request, progress_callback)


class RefusingBackend(MockBackend):
    async def generate(self, request, progress_callback=None) -> SheetResult:
        raise GenerationRefusedError("Cannot depict this character.")


def _preset(action_id: str):
    preset = get_action(action_id)
    assert preset is not None
    return preset


@pytest.mark.asyncio
async def test_generate_with_pose_guide(reference_image: Path, app_config: AppConfig):
    backend = RecordingBackend()
    result = await generate_sprite_sheet(
        reference_image,
        _preset("WALK_CYCLE"),
        backend,
        app_config,
        direction=Direction.SIDE_LEFT,
        archetype=Archetype.ROGUE,
    )

    out = app_config.output_dir
    assert result.action_id == "WALK_CYCLE"
    assert result.model == "mock-v1"
    assert result.pose_guide_path == out / "walk_cycle_side_left_pose_guide.png"
    assert result.sheet_path == out / "walk_cycle_side_left_sheet.png"
    assert [p.name for p in result.frame_paths] == [
        f"walk_cycle_side_left_frame_{i}.png" for i in range(1, 7)
    ]
    assert all(p.exists() for p in result.frame_paths)
    assert Image.open(result.frame_paths[0]).size == (100, 100)

    request = backend.requests[0]
    assert request.pose_guide == synthesize("WALK_CYCLE", Direction.SIDE_LEFT, Archetype.ROGUE)
    assert request.pose_guide == result.pose_guide_path.read_bytes()
    assert request.reference_image == reference_image.read_bytes()
    assert request.reference_mime_type == "image/png"
    assert request.aspect_ratio == "16:9"
    assert "IMAGE 2" in request.prompt


@pytest.mark.asyncio
async def test_action_without_guide_uses_layout_prompt(
    reference_image: Path, app_config: AppConfig,
):
    backend = RecordingBackend()
    preset = _preset("VICTORY_POSE")
    result = await generate_sprite_sheet(reference_image, preset, backend, app_config)

    assert result.pose_guide_path is None
    request = backend.requests[0]
    assert request.pose_guide is None
    assert preset.prompt_logic in request.prompt
    assert not list(app_config.output_dir.glob("*_pose_guide.png"))


@pytest.mark.asyncio
async def test_guide_can_be_disabled(reference_image: Path, app_config: AppConfig):
    backend = RecordingBackend()
    await generate_sprite_sheet(
        reference_image, _preset("RUN_CYCLE"), backend, app_config, use_pose_guide=False,
    )
    assert backend.requests[0].pose_guide is None


@pytest.mark.asyncio
async def test_defaults_come_from_config(reference_image: Path, app_config: AppConfig):
    app_config.generation.style = SpriteStyle.SKETCH
    app_config.generation.direction = Direction.FRONT
    app_config.generation.negative_prompt = "no capes"
    backend = RecordingBackend()

    result = await generate_sprite_sheet(
        reference_image, _preset("IDLE_BREATHE"), backend, app_config,
    )

    assert result.sheet_path.name == "idle_breathe_front_sheet.png"
    assert "hand-drawn sketch" in result.prompt
    assert result.prompt.rstrip().endswith("no capes")


@pytest.mark.asyncio
async def test_output_dir_override(reference_image: Path, app_config: AppConfig, tmp_path: Path):
    target = tmp_path / "custom"
    result = await generate_sprite_sheet(
        reference_image, _preset("JUMP_FULL"), RecordingBackend(), app_config, output_dir=target,
    )
    assert result.sheet_path.parent == target
    assert not app_config.output_dir.exists()


@pytest.mark.asyncio
async def test_refusal_propagates(reference_image: Path, app_config: AppConfig):
    with pytest.raises(GenerationRefusedError, match="Generation Refused"):
        await generate_sprite_sheet(
            reference_image, _preset("WALK_CYCLE"), RefusingBackend(), app_config,
        )


@pytest.mark.asyncio
async def test_missing_reference(tmp_path: Path, app_config: AppConfig):
    with pytest.raises(ReferenceImageError, match="not found"):
        await generate_sprite_sheet(
            tmp_path / "nobody.png", _preset("WALK_CYCLE"), RecordingBackend(), app_config,
        )


def test_reference_mime_detected_from_content(tmp_path: Path):
    path = tmp_path / "hero.png"  # misleading extension
    Image.new("RGB", (8, 8), (10, 20, 30)).save(path, "JPEG")
    data, mime_type = read_reference_image(path)
    assert mime_type == "image/jpeg"
    assert data == path.read_bytes()


def test_reference_not_an_image(tmp_path: Path):
    path = tmp_path / "notes.png"
    path.write_text("just text")
    with pytest.raises(ReferenceImageError, match="not a readable image"):
        read_reference_image(path)
