"""SpriteLoop data models - pure Pydantic and dataclasses, no I/O."""

from spriteloop.models.action import (
    ACTION_PRESETS,
    ActionPreset,
    get_action,
    resolve_family,
)
from spriteloop.models.enums import (
    ActionFamily,
    Archetype,
    Direction,
    SpriteStyle,
)
from spriteloop.models.figure import (
    ArchetypeModifiers,
    FigureFrame,
    Limb,
    Point,
    PoseGuideRequest,
)

__all__ = [
    "ACTION_PRESETS",
    "ActionFamily",
    "ActionPreset",
    "Archetype",
    "ArchetypeModifiers",
    "Direction",
    "FigureFrame",
    "Limb",
    "Point",
    "PoseGuideRequest",
    "SpriteStyle",
    "get_action",
    "resolve_family",
]
