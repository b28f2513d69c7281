"""Tests for MockBackend."""

import io

import pytest
from PIL import Image

from spriteloop.backend.base import GenerationBackend, SheetRequest
from spriteloop.backend.mock import MockBackend, create_debug_sheet
from spriteloop.pipeline.slicing import slice_sprite_sheet


@pytest.fixture
def mock_backend():
    return MockBackend()


def _request(**kwargs) -> SheetRequest:
    return SheetRequest(prompt="walk", reference_image=b"ref", **kwargs)


@pytest.mark.asyncio
async def test_protocol_compliance():
    """MockBackend satisfies the GenerationBackend protocol."""
    assert isinstance(MockBackend(), GenerationBackend)


@pytest.mark.asyncio
async def test_is_available(mock_backend):
    await mock_backend.connect()
    assert await mock_backend.is_available() is True
    await mock_backend.disconnect()


@pytest.mark.asyncio
async def test_get_models(mock_backend):
    assert await mock_backend.get_models() == ["mock-v1"]


@pytest.mark.asyncio
async def test_generate_returns_full_hd_png(mock_backend):
    result = await mock_backend.generate(_request())
    assert result.mime_type == "image/png"
    assert result.model == "mock-v1"
    img = Image.open(io.BytesIO(result.image))
    assert img.size == (1920, 1080)


@pytest.mark.asyncio
async def test_generate_custom_size():
    result = await MockBackend(width=600, height=200).generate(_request())
    assert Image.open(io.BytesIO(result.image)).size == (600, 200)


@pytest.mark.asyncio
async def test_generate_reports_pose_guide(mock_backend):
    with_guide = await mock_backend.generate(_request(pose_guide=b"png"))
    without = await mock_backend.generate(_request())
    assert with_guide.metadata == {"backend": "mock", "pose_guide": True}
    assert without.metadata["pose_guide"] is False


@pytest.mark.asyncio
async def test_progress_callback(mock_backend):
    steps_received = []

    def on_progress(step, total, status):
        steps_received.append((step, total, status))

    await mock_backend.generate(_request(), progress_callback=on_progress)

    assert len(steps_received) == 10
    assert steps_received[0][0] == 1
    assert steps_received[-1][0] == 10
    assert all(total == 10 for _, total, _ in steps_received)


@pytest.mark.asyncio
async def test_refine_prompt(mock_backend):
    assert await mock_backend.refine_prompt("  a spinning kick ") == "[MOCK] a spinning kick"


def test_debug_sheet_has_one_bar_per_frame():
    frames = slice_sprite_sheet(create_debug_sheet(1920, 1080))
    colours = {frame.getpixel((160, 1070)) for frame in frames}
    assert len(colours) == 6
