"""Skeleton geometry for the procedural pose guide."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

from spriteloop.models.enums import Archetype, Direction

Side = Literal["left", "right"]


@dataclass(frozen=True)
class Point:
    """A 2D point in column-local pixel coordinates (y grows downwards)."""

    x: float
    y: float

    def shifted(self, dx: float = 0.0, dy: float = 0.0) -> Point:
        return Point(self.x + dx, self.y + dy)

    def rotated(self, pivot: Point, angle: float) -> Point:
        """Rotate clockwise on screen by *angle* radians around *pivot*."""
        if angle == 0.0:
            return self
        dx, dy = self.x - pivot.x, self.y - pivot.y
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        return Point(
            pivot.x + dx * cos_a - dy * sin_a,
            pivot.y + dx * sin_a + dy * cos_a,
        )

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Limb:
    """A two-segment limb: hip/shoulder -> knee/elbow -> foot/hand."""

    root: Point
    joint: Point
    end: Point

    def rotated(self, pivot: Point, angle: float) -> Limb:
        return Limb(
            self.root.rotated(pivot, angle),
            self.joint.rotated(pivot, angle),
            self.end.rotated(pivot, angle),
        )

    def with_end(self, end: Point) -> Limb:
        return replace(self, end=end)


@dataclass(frozen=True)
class FigureFrame:
    """A fully posed figure for one column of the pose guide."""

    column: int
    phase: float
    hip: Point
    shoulder: Point
    head: Point
    nose: Point | None
    left_leg: Limb
    right_leg: Limb
    left_arm: Limb
    right_arm: Limb
    lean: float = 0.0
    y_offset: float = 0.0
    near_side: Side = "right"
    x_mod: float = 1.0

    @property
    def near_leg(self) -> Limb:
        return self.right_leg if self.near_side == "right" else self.left_leg

    @property
    def far_leg(self) -> Limb:
        return self.left_leg if self.near_side == "right" else self.right_leg

    @property
    def near_arm(self) -> Limb:
        return self.right_arm if self.near_side == "right" else self.left_arm

    @property
    def far_arm(self) -> Limb:
        return self.left_arm if self.near_side == "right" else self.right_arm


@dataclass(frozen=True)
class ArchetypeModifiers:
    """Posture bias applied on top of every motion family."""

    leg_spread: float = 1.0
    crouch_offset: float = 0.0
    arm_lift: float = 0.0
    spine_curve: float = 0.0
    side_lean: float = 0.0


class PoseGuideRequest(BaseModel):
    """Input to the pose guide synthesizer.

    Unknown direction or archetype names are kept as plain strings; the
    synthesizer falls back to neutral geometry for them instead of failing.
    """

    model_config = ConfigDict(frozen=True)

    action_id: str
    direction: Direction | str = Direction.SIDE
    archetype: Archetype | str = Archetype.VANGUARD

    @field_validator("direction", mode="before")
    @classmethod
    def _coerce_direction(cls, value: object) -> object:
        return _coerce(Direction, value)

    @field_validator("archetype", mode="before")
    @classmethod
    def _coerce_archetype(cls, value: object) -> object:
        return _coerce(Archetype, value)


def _coerce(enum_cls: type[Direction] | type[Archetype], value: object) -> object:
    if isinstance(value, enum_cls) or not isinstance(value, str):
        return value
    try:
        return enum_cls(value.strip().upper())
    except ValueError:
        return value
