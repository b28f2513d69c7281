"""Tests for sprite sheet prompt construction."""

import pytest

from spriteloop.models import SpriteStyle, get_action
from spriteloop.pipeline.prompts import (
    BACKGROUND_RULE,
    DEFAULT_NEGATIVE,
    STYLE_MODIFIERS,
    build_sheet_prompt,
    build_style_prompt,
)


@pytest.fixture
def walk():
    preset = get_action("WALK_CYCLE")
    assert preset is not None
    return preset


@pytest.mark.parametrize("style", list(SpriteStyle))
def test_style_prompt_ends_with_background_rule(style: SpriteStyle):
    prompt = build_style_prompt(style)
    assert prompt.startswith(STYLE_MODIFIERS[style])
    assert prompt.endswith(BACKGROUND_RULE)


def test_pose_transfer_prompt(walk):
    prompt = build_sheet_prompt(walk, SpriteStyle.PIXEL_ART)
    assert "IMAGE 2" in prompt
    assert "Red limbs are nearest" in prompt
    assert "Pixel art style" in prompt
    # Frame logic is carried by the guide, not the text.
    assert walk.prompt_logic not in prompt
    assert DEFAULT_NEGATIVE in prompt


def test_layout_prompt_without_guide(walk):
    prompt = build_sheet_prompt(walk, with_pose_guide=False)
    assert walk.prompt_logic in prompt
    assert "IMAGE 2" not in prompt
    assert "6 equal vertical" in prompt


def test_positive_and_negative_are_inserted(walk):
    prompt = build_sheet_prompt(
        walk,
        positive="  holding a lantern  ",
        negative="capes",
    )
    assert "[ADDITIONAL INSTRUCTIONS]\nholding a lantern\n" in prompt
    assert prompt.rstrip().endswith("capes")
    assert DEFAULT_NEGATIVE not in prompt
