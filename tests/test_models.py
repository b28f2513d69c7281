"""Tests for data models."""

import math

import pytest
from pydantic import ValidationError

from spriteloop.models import (
    ACTION_PRESETS,
    ActionFamily,
    ActionPreset,
    Archetype,
    Direction,
    Point,
    PoseGuideRequest,
    get_action,
    resolve_family,
)


def test_direction_values():
    assert [d.value for d in Direction] == [
        "FRONT", "BACK", "SIDE", "SIDE_LEFT", "THREE_QUARTER", "ISO_FRONT", "ISO_BACK",
    ]


def test_archetype_values():
    assert {a.value for a in Archetype} == {"VANGUARD", "ROGUE", "MYSTIC", "BEAST"}


def test_preset_ids_are_unique():
    ids = [p.id for p in ACTION_PRESETS]
    assert len(ids) == len(set(ids))
    assert all(p.id == p.id.upper() for p in ACTION_PRESETS)


def test_preset_is_frozen():
    preset = ACTION_PRESETS[0]
    with pytest.raises(ValidationError):
        preset.label = "changed"  # type: ignore[misc]


def test_get_action_case_insensitive():
    preset = get_action("  walk_cycle ")
    assert preset is not None
    assert preset.id == "WALK_CYCLE"
    assert get_action("MOONWALK") is None


def test_text_only_presets():
    without_guide = {p.id for p in ACTION_PRESETS if not p.pose_guide}
    assert without_guide == {"HIT_REACTION", "CLIMB_LADDER", "VICTORY_POSE", "DEATH"}


@pytest.mark.parametrize(
    ("action_id", "family"),
    [
        ("IDLE_BREATHE", ActionFamily.IDLE),
        ("WALK_CYCLE", ActionFamily.WALK),
        ("RUN_CYCLE", ActionFamily.RUN),
        ("RUN_START_STOP", ActionFamily.RUN),
        ("STRAFE_CYCLE", ActionFamily.STRAFE),
        ("ATTACK_MELEE", ActionFamily.ATTACK),
        ("JUMP_FULL", ActionFamily.JUMP),
        ("DASH_SLIDE", ActionFamily.DASH),
    ],
)
def test_resolve_family_registered(action_id: str, family: ActionFamily):
    assert resolve_family(action_id) is family


@pytest.mark.parametrize(
    ("action_id", "family"),
    [
        ("ATTACK_HEAVY", ActionFamily.ATTACK),
        ("attack_spin", ActionFamily.ATTACK),
        ("WALK_RUN", ActionFamily.WALK),
        ("RUN", ActionFamily.RUN),
        ("SUPERWALK", ActionFamily.NONE),
        ("HEAVY_ATTACK", ActionFamily.NONE),
        ("", ActionFamily.NONE),
    ],
)
def test_resolve_family_by_leading_token(action_id: str, family: ActionFamily):
    assert resolve_family(action_id) is family


def test_custom_preset_defaults():
    preset = ActionPreset(id="WAVE", label="Wave", description="Hand wave", prompt_logic="")
    assert preset.family is ActionFamily.NONE
    assert preset.pose_guide is True


def test_pose_guide_request_coerces_names():
    request = PoseGuideRequest(action_id="WALK_CYCLE", direction=" side_left", archetype="beast")
    assert request.direction is Direction.SIDE_LEFT
    assert request.archetype is Archetype.BEAST


def test_pose_guide_request_keeps_unknown_names():
    request = PoseGuideRequest(action_id="WALK_CYCLE", direction="TOP_DOWN", archetype="PALADIN")
    assert request.direction == "TOP_DOWN"
    assert request.archetype == "PALADIN"


def test_pose_guide_request_defaults():
    request = PoseGuideRequest(action_id="IDLE_BREATHE")
    assert request.direction is Direction.SIDE
    assert request.archetype is Archetype.VANGUARD


def test_point_rotation_is_clockwise_on_screen():
    pivot = Point(0.0, 0.0)
    above = Point(0.0, -10.0)
    turned = above.rotated(pivot, math.pi / 2)
    assert turned.x == pytest.approx(10.0)
    assert turned.y == pytest.approx(0.0, abs=1e-9)


def test_point_rotation_zero_is_identity():
    p = Point(3.0, 4.0)
    assert p.rotated(Point(1.0, 1.0), 0.0) is p
