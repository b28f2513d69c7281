"""Enumerations used throughout SpriteLoop."""

from enum import StrEnum


class Direction(StrEnum):
    FRONT = "FRONT"
    BACK = "BACK"
    SIDE = "SIDE"
    SIDE_LEFT = "SIDE_LEFT"
    THREE_QUARTER = "THREE_QUARTER"
    ISO_FRONT = "ISO_FRONT"
    ISO_BACK = "ISO_BACK"


class Archetype(StrEnum):
    VANGUARD = "VANGUARD"
    ROGUE = "ROGUE"
    MYSTIC = "MYSTIC"
    BEAST = "BEAST"


class SpriteStyle(StrEnum):
    NEO_RETRO = "NEO_RETRO"
    PIXEL_ART = "PIXEL_ART"
    FLAT_VECTOR = "FLAT_VECTOR"
    SKETCH = "SKETCH"


class ActionFamily(StrEnum):
    """Motion families the pose guide knows how to animate."""

    IDLE = "IDLE"
    WALK = "WALK"
    RUN = "RUN"
    STRAFE = "STRAFE"
    ATTACK = "ATTACK"
    JUMP = "JUMP"
    DASH = "DASH"
    GUARD = "GUARD"
    CAST = "CAST"
    HIT = "HIT"
    CLIMB = "CLIMB"
    VICTORY = "VICTORY"
    DEATH = "DEATH"
    NONE = "NONE"
