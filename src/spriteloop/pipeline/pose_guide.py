"""Procedural pose guide: a 6-column strip of capsule figures.

Every figure is a closed-form function of its column's phase in the motion
cycle, the camera direction and the character archetype.  The rendered
strip is attached to the generation request as a structural reference, so
nearer limbs are drawn in :data:`NEAR_COLOUR` and farther limbs in
:data:`FAR_COLOUR` to make occlusion readable for the image model.
"""

from __future__ import annotations

import io
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw

from spriteloop.models.action import resolve_family
from spriteloop.models.enums import ActionFamily, Archetype, Direction
from spriteloop.models.figure import (
    ArchetypeModifiers,
    FigureFrame,
    Limb,
    Point,
    PoseGuideRequest,
    Side,
)

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Canvas and body proportions
# ---------------------------------------------------------------------------

CANVAS_WIDTH = 1920
CANVAS_HEIGHT = 1080
FRAME_COUNT = 6
COLUMN_WIDTH = CANVAS_WIDTH // FRAME_COUNT

FLOOR_Y = 0.85 * CANVAS_HEIGHT
TOTAL_HEIGHT = 0.55 * CANVAS_HEIGHT
HIP_Y = FLOOR_Y - 0.5 * TOTAL_HEIGHT
SHOULDER_Y = FLOOR_Y - 0.85 * TOTAL_HEIGHT
HEAD_Y = FLOOR_Y - TOTAL_HEIGHT
HEAD_RADIUS = 55

STANCE_WIDTH = 40.0
ARM_SPREAD = 60.0
HAND_FLARE = 12.0
ARM_DROP = 200.0
KNEE_BEND = 12.0
ELBOW_BEND = 10.0
NOSE_LENGTH = HEAD_RADIUS + 15

SMEAR_COLUMN = 2
SMEAR_OFFSET = 60.0
ATTACK_REACH = 65.0
CAST_REACH = 90.0

# Nothing is drawn closer than this to a column edge.
BAND_MARGIN = 4.0

LEG_WIDTH = 26
ARM_WIDTH = 20
SPINE_WIDTH = 36
JOINT_RADIUS = 18
NOSE_WIDTH = 8
GROUND_WIDTH = 3

BACKGROUND: tuple[int, int, int] = (255, 255, 255)
NEAR_COLOUR: tuple[int, int, int] = (230, 50, 50)
FAR_COLOUR: tuple[int, int, int] = (50, 90, 230)
TORSO_COLOUR: tuple[int, int, int] = (70, 70, 70)
HEAD_COLOUR: tuple[int, int, int] = (110, 110, 110)
NOSE_COLOUR: tuple[int, int, int] = (0, 0, 0)
GROUND_COLOUR: tuple[int, int, int] = (200, 200, 200)

# ---------------------------------------------------------------------------
# Direction and archetype tables
# ---------------------------------------------------------------------------

X_MOD: dict[str, float] = {
    Direction.FRONT: 0.4,
    Direction.BACK: 0.4,
    Direction.THREE_QUARTER: 0.7,
    Direction.ISO_FRONT: 0.7,
    Direction.ISO_BACK: 0.7,
    Direction.SIDE: 1.0,
    Direction.SIDE_LEFT: 1.0,
}

# Horizontal share of the nose vector; 0 means the face is not drawn.
FACING: dict[str, float] = {
    Direction.SIDE: 1.0,
    Direction.SIDE_LEFT: -1.0,
    Direction.THREE_QUARTER: 0.5,
    Direction.ISO_FRONT: 0.5,
}

# How much of the knee/elbow bend is visible from this camera.
PROFILE: dict[str, float] = {
    Direction.SIDE: 1.0,
    Direction.SIDE_LEFT: 1.0,
    Direction.THREE_QUARTER: 0.5,
    Direction.ISO_FRONT: 0.5,
    Direction.ISO_BACK: 0.5,
}

NEAR_SIDE: dict[str, Side] = {
    Direction.SIDE_LEFT: "left",
    Direction.BACK: "left",
    Direction.ISO_BACK: "left",
}

SIDE_DIRECTIONS = frozenset({Direction.SIDE, Direction.SIDE_LEFT})

ARCHETYPES: dict[str, ArchetypeModifiers] = {
    Archetype.VANGUARD: ArchetypeModifiers(leg_spread=1.5),
    Archetype.ROGUE: ArchetypeModifiers(crouch_offset=20.0, side_lean=0.1),
    Archetype.MYSTIC: ArchetypeModifiers(arm_lift=-30.0),
    Archetype.BEAST: ArchetypeModifiers(spine_curve=15.0, arm_lift=40.0),
}

NEUTRAL = ArchetypeModifiers()


class RenderSurfaceError(RuntimeError):
    """Raised when no raster surface can be allocated or encoded."""


# ---------------------------------------------------------------------------
# Motion model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Stance:
    """Camera- and archetype-derived constants shared by every column."""

    x_mod: float
    forward: float
    facing: float
    profile: float
    side_view: bool
    near_side: Side
    mods: ArchetypeModifiers

    def near_far(
        self, near: tuple[float, float], far: tuple[float, float],
    ) -> tuple[tuple[float, float], tuple[float, float]]:
        """Order a (near, far) pair as (left, right)."""
        if self.near_side == "right":
            return far, near
        return near, far


@dataclass(frozen=True)
class Motion:
    """Displacements a motion family applies to the neutral skeleton.

    Feet are ``(dx, lift)`` relative to their planted position; hands are
    ``(dx, dy)`` relative to a relaxed hanging arm.
    """

    y_offset: float = 0.0
    lean: float = 0.0
    hip_shift: float = 0.0
    left_foot: tuple[float, float] = (0.0, 0.0)
    right_foot: tuple[float, float] = (0.0, 0.0)
    left_hand: tuple[float, float] = (0.0, 0.0)
    right_hand: tuple[float, float] = (0.0, 0.0)


MotionFn = Callable[[float, Stance], Motion]


def _base_lean(stance: Stance) -> float:
    return stance.mods.side_lean if stance.side_view else 0.0


def _static(phase: float, stance: Stance) -> Motion:
    return Motion(y_offset=stance.mods.crouch_offset, lean=_base_lean(stance))


def _walk(phase: float, stance: Stance) -> Motion:
    stride = 60.0 * stance.x_mod * stance.mods.leg_spread
    left_dx = stride * math.sin(phase)
    right_dx = stride * math.sin(phase + math.pi)
    left_lift = right_lift = 0.0
    if not stance.side_view:
        left_lift = 40.0 * max(0.0, math.sin(phase))
        right_lift = 40.0 * max(0.0, math.sin(phase + math.pi))
    return Motion(
        y_offset=-15.0 * abs(math.cos(2 * phase)) + stance.mods.crouch_offset,
        lean=_base_lean(stance),
        left_foot=(left_dx, left_lift),
        right_foot=(right_dx, right_lift),
        # Arms counter-swing against the leg on the same side.
        left_hand=(-0.5 * left_dx, 0.0),
        right_hand=(-0.5 * right_dx, 0.0),
    )


def _run(phase: float, stance: Stance) -> Motion:
    stride = 100.0 * stance.x_mod * stance.mods.leg_spread
    left_dx = stride * math.sin(phase)
    right_dx = stride * math.sin(phase + math.pi)
    lean = _base_lean(stance) + (0.3 if stance.side_view else 0.0)
    return Motion(
        y_offset=30.0 * abs(math.sin(phase)) + stance.mods.crouch_offset,
        lean=lean,
        left_foot=(left_dx, 0.0),
        right_foot=(right_dx, 0.0),
        left_hand=(-0.7 * left_dx, -60.0),
        right_hand=(-0.7 * right_dx, -60.0),
    )


def _idle(phase: float, stance: Stance) -> Motion:
    sway = 5.0 * math.sin(phase)
    return Motion(
        y_offset=sway + stance.mods.crouch_offset,
        lean=_base_lean(stance),
        hip_shift=sway,
    )


def _strafe(phase: float, stance: Stance) -> Motion:
    return Motion(
        y_offset=stance.mods.crouch_offset,
        lean=_base_lean(stance),
        left_foot=(40.0 * math.cos(phase), 0.0),
        right_foot=(40.0 * math.sin(phase), 0.0),
    )


def _attack(phase: float, stance: Stance) -> Motion:
    swing = math.sin(phase - math.pi / 6)
    strike = max(0.0, swing)
    reach = stance.forward * ATTACK_REACH * stance.x_mod
    near_hand = (reach * swing, -0.7 * ARM_DROP * strike)
    far_hand = (stance.forward * 20.0, -80.0)
    near_foot = (stance.forward * 40.0 * stance.x_mod * strike, 0.0)
    left_hand, right_hand = stance.near_far(near_hand, far_hand)
    left_foot, right_foot = stance.near_far(near_foot, (0.0, 0.0))
    return Motion(
        y_offset=stance.mods.crouch_offset,
        lean=_base_lean(stance),
        left_foot=left_foot,
        right_foot=right_foot,
        left_hand=left_hand,
        right_hand=right_hand,
    )


def _jump(phase: float, stance: Stance) -> Motion:
    squash = 25.0 * max(0.0, math.cos(phase))
    rise = 160.0 * max(0.0, math.sin(phase - math.pi / 6))
    reach = -120.0 * rise / 160.0
    return Motion(
        y_offset=squash - rise + stance.mods.crouch_offset,
        lean=_base_lean(stance),
        left_foot=(0.0, rise),
        right_foot=(0.0, rise),
        left_hand=(0.0, reach),
        right_hand=(0.0, reach),
    )


def _dash(phase: float, stance: Stance) -> Motion:
    near_foot = (stance.forward * 90.0 * stance.x_mod, 0.0)
    far_foot = (-stance.forward * 70.0 * stance.x_mod, 0.0)
    left_foot, right_foot = stance.near_far(near_foot, far_foot)
    trail = (-stance.forward * 50.0, -20.0)
    return Motion(
        y_offset=stance.mods.crouch_offset + 25.0,
        lean=_base_lean(stance) + (0.3 if stance.side_view else 0.0),
        left_foot=left_foot,
        right_foot=right_foot,
        left_hand=trail,
        right_hand=trail,
    )


def _guard(phase: float, stance: Stance) -> Motion:
    inward = 0.8 * ARM_SPREAD * (1.0 - stance.x_mod)
    ahead = stance.forward * stance.profile * 45.0
    lift = -(ARM_DROP + 40.0)
    return Motion(
        y_offset=3.0 * math.sin(phase) + stance.mods.crouch_offset + 15.0,
        lean=_base_lean(stance),
        left_hand=(inward + ahead, lift),
        right_hand=(-inward + ahead, lift),
    )


def _cast(phase: float, stance: Stance) -> Motion:
    charge = max(0.0, math.sin(phase - math.pi / 6))
    push = stance.forward * CAST_REACH * stance.x_mod
    hand = (push * charge, -0.9 * ARM_DROP * charge - 20.0)
    return Motion(
        y_offset=stance.mods.crouch_offset,
        lean=_base_lean(stance),
        left_hand=hand,
        right_hand=hand,
    )


MOTIONS: dict[ActionFamily, MotionFn] = {
    ActionFamily.WALK: _walk,
    ActionFamily.RUN: _run,
    ActionFamily.IDLE: _idle,
    ActionFamily.STRAFE: _strafe,
    ActionFamily.ATTACK: _attack,
    ActionFamily.JUMP: _jump,
    ActionFamily.DASH: _dash,
    ActionFamily.GUARD: _guard,
    ActionFamily.CAST: _cast,
}

# Per-column lean overrides for actions that are not pure loops.
LEAN_OVERRIDES: dict[str, dict[int, float]] = {
    "RUN_START_STOP": {0: 0.5, 1: 0.5, 5: -0.2},
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def column_phase(column: int) -> float:
    """Position of *column* in the motion cycle, in radians."""
    return column / FRAME_COUNT * 2 * math.pi


def direction_width(direction: Direction | str) -> float:
    """Horizontal limb extension for a camera direction (``x_mod``)."""
    return X_MOD.get(direction, 1.0)


def archetype_modifiers(archetype: Archetype | str) -> ArchetypeModifiers:
    return ARCHETYPES.get(archetype, NEUTRAL)


def stance_for(direction: Direction | str, archetype: Archetype | str) -> Stance:
    return Stance(
        x_mod=direction_width(direction),
        forward=-1.0 if direction == Direction.SIDE_LEFT else 1.0,
        facing=FACING.get(direction, 0.0),
        profile=PROFILE.get(direction, 0.0),
        side_view=direction in SIDE_DIRECTIONS,
        near_side=NEAR_SIDE.get(direction, "right"),
        mods=archetype_modifiers(archetype),
    )


def pose_at_phase(
    family: ActionFamily,
    phase: float,
    direction: Direction | str,
    archetype: Archetype | str,
    *,
    column: int = 0,
) -> FigureFrame:
    """Evaluate a motion family at an arbitrary phase.

    No column-specific adjustments (lean overrides, attack smear) are
    applied, so this is the pure periodic motion function.
    """
    stance = stance_for(direction, archetype)
    motion = MOTIONS.get(family, _static)(phase, stance)
    return _build_figure(column, phase, motion, stance)


def pose_figure(request: PoseGuideRequest, column: int) -> FigureFrame:
    """Pose the figure for one column of the guide."""
    family = resolve_family(request.action_id)
    stance = stance_for(request.direction, request.archetype)
    phase = column_phase(column)
    motion = MOTIONS.get(family, _static)(phase, stance)

    # Lean is a forward tilt, which only reads in profile.
    overrides = LEAN_OVERRIDES.get(request.action_id.strip().upper(), {})
    if stance.side_view and column in overrides:
        motion = replace(motion, lean=overrides[column])

    frame = _build_figure(column, phase, motion, stance)
    if family is ActionFamily.ATTACK and column == SMEAR_COLUMN:
        frame = _fit_to_band(_apply_smear(frame, stance))
    return frame


def pose_figures(request: PoseGuideRequest) -> list[FigureFrame]:
    """Pose all columns of the guide, left to right."""
    return [pose_figure(request, column) for column in range(FRAME_COUNT)]


def render_pose_guide(request: PoseGuideRequest) -> Image.Image:
    """Render the full 1920x1080 pose guide strip."""
    canvas = _new_surface(CANVAS_WIDTH, CANVAS_HEIGHT)

    for frame in pose_figures(request):
        # Each column is drawn on its own tile so nothing bleeds into a
        # neighbouring band.
        tile = _new_surface(COLUMN_WIDTH, CANVAS_HEIGHT)
        draw = ImageDraw.Draw(tile)
        draw.line(
            [(0, FLOOR_Y), (COLUMN_WIDTH, FLOOR_Y)],
            fill=GROUND_COLOUR,
            width=GROUND_WIDTH,
        )
        _draw_figure(draw, frame)
        canvas.paste(tile, (frame.column * COLUMN_WIDTH, 0))

    logger.debug(
        "Rendered pose guide action=%s direction=%s archetype=%s family=%s",
        request.action_id,
        request.direction,
        request.archetype,
        resolve_family(request.action_id),
    )
    return canvas


def synthesize(
    action_id: str,
    direction: Direction | str = Direction.SIDE,
    archetype: Archetype | str = Archetype.VANGUARD,
) -> bytes:
    """Render the pose guide for an action and return PNG bytes."""
    request = PoseGuideRequest(
        action_id=action_id, direction=direction, archetype=archetype,
    )
    return encode_png(render_pose_guide(request))


def save_pose_guide(request: PoseGuideRequest, output_path: Path) -> Path:
    """Render the pose guide and write it to *output_path* as PNG."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(encode_png(render_pose_guide(request)))
    logger.info("Saved pose guide: %s", output_path)
    return output_path


def drawn_extent(frame: FigureFrame) -> tuple[float, float, float, float]:
    """Column-local ``(left, top, right, bottom)`` covered by a figure's strokes."""
    shapes = _drawn_shapes(frame)
    return (
        min(p.x - r for p, r in shapes),
        min(p.y - r for p, r in shapes),
        max(p.x + r for p, r in shapes),
        max(p.y + r for p, r in shapes),
    )


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    try:
        image.save(buffer, "PNG")
    except (OSError, KeyError) as exc:
        msg = f"PNG encoding is unavailable: {exc}"
        raise RenderSurfaceError(msg) from exc
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _new_surface(width: int, height: int) -> Image.Image:
    try:
        return Image.new("RGB", (width, height), BACKGROUND)
    except (OSError, ValueError, MemoryError) as exc:
        msg = f"Cannot allocate a {width}x{height} drawing surface: {exc}"
        raise RenderSurfaceError(msg) from exc


def _build_figure(column: int, phase: float, motion: Motion, stance: Stance) -> FigureFrame:
    mods = stance.mods
    centre_x = COLUMN_WIDTH / 2
    spread = 1.0 - stance.x_mod
    bend = stance.forward * stance.profile

    hip = Point(centre_x + motion.hip_shift, HIP_Y + motion.y_offset)
    stance_half = STANCE_WIDTH * mods.leg_spread * spread

    def leg(sign: float, foot: tuple[float, float]) -> Limb:
        dx, lift = foot
        root = hip.shifted(sign * 0.5 * stance_half)
        end = Point(centre_x + sign * stance_half + dx, FLOOR_Y - lift)
        knee = Point(
            (root.x + end.x) / 2 + bend * (KNEE_BEND + 0.5 * lift),
            (root.y + end.y) / 2,
        )
        return Limb(root, knee, end)

    shoulder = Point(hip.x + stance.forward * mods.spine_curve, SHOULDER_Y + motion.y_offset)
    head = Point(hip.x + stance.forward * mods.spine_curve * 1.5, HEAD_Y + motion.y_offset)

    def arm(sign: float, hand: tuple[float, float]) -> Limb:
        dx, dy = hand
        root = shoulder.shifted(sign * ARM_SPREAD * spread)
        end = Point(
            root.x + sign * HAND_FLARE * spread + dx,
            shoulder.y + ARM_DROP + mods.arm_lift + dy,
        )
        elbow = Point((root.x + end.x) / 2 - bend * ELBOW_BEND, (root.y + end.y) / 2)
        return Limb(root, elbow, end)

    left_leg = leg(-1.0, motion.left_foot)
    right_leg = leg(1.0, motion.right_foot)
    left_arm = arm(-1.0, motion.left_hand)
    right_arm = arm(1.0, motion.right_hand)

    # Lean tips the upper body around the hip towards the facing direction.
    angle = stance.forward * motion.lean
    shoulder = shoulder.rotated(hip, angle)
    head = head.rotated(hip, angle)
    left_arm = left_arm.rotated(hip, angle)
    right_arm = right_arm.rotated(hip, angle)

    nose = head.shifted(stance.facing * NOSE_LENGTH) if stance.facing else None

    frame = FigureFrame(
        column=column,
        phase=phase,
        hip=hip,
        shoulder=shoulder,
        head=head,
        nose=nose,
        left_leg=left_leg,
        right_leg=right_leg,
        left_arm=left_arm,
        right_arm=right_arm,
        lean=motion.lean,
        y_offset=motion.y_offset,
        near_side=stance.near_side,
        x_mod=stance.x_mod,
    )
    return _fit_to_band(frame)


def _apply_smear(frame: FigureFrame, stance: Stance) -> FigureFrame:
    """Stretch the near hand on the impact frame to read as motion blur."""
    near = frame.near_arm
    smeared = near.with_end(near.end.shifted(stance.forward * SMEAR_OFFSET))
    if frame.near_side == "right":
        return replace(frame, right_arm=smeared)
    return replace(frame, left_arm=smeared)


def _drawn_shapes(frame: FigureFrame) -> list[tuple[Point, float]]:
    """Every joint paired with the half-width of the strokes that reach it."""
    shapes = [
        (frame.hip, max(JOINT_RADIUS, SPINE_WIDTH / 2)),
        (frame.shoulder, max(JOINT_RADIUS, SPINE_WIDTH / 2)),
        (frame.head, HEAD_RADIUS),
    ]
    if frame.nose is not None:
        shapes.append((frame.nose, NOSE_WIDTH / 2))
    for limb in (frame.left_leg, frame.right_leg):
        shapes.extend((p, LEG_WIDTH / 2) for p in (limb.root, limb.joint, limb.end))
    for limb in (frame.left_arm, frame.right_arm):
        shapes.extend((p, ARM_WIDTH / 2) for p in (limb.root, limb.joint, limb.end))
    return shapes


def _fit_to_band(frame: FigureFrame) -> FigureFrame:
    """Pull a figure that overhangs its column back inside the band.

    The figure is first re-centred on its drawn extent; if it is still wider
    than the band it is squeezed horizontally about the column centre.
    Figures that already fit are returned unchanged.
    """
    left, _, right, _ = drawn_extent(frame)
    if left >= BAND_MARGIN and right <= COLUMN_WIDTH - BAND_MARGIN:
        return frame

    centre_x = COLUMN_WIDTH / 2
    half_band = centre_x - BAND_MARGIN
    shift = centre_x - (left + right) / 2
    scale = 1.0
    for p, radius in _drawn_shapes(frame):
        offset = abs(p.x + shift - centre_x)
        if offset > 0:
            scale = min(scale, (half_band - radius) / offset)

    def move(p: Point) -> Point:
        return Point(centre_x + (p.x + shift - centre_x) * scale, p.y)

    def move_limb(limb: Limb) -> Limb:
        return Limb(move(limb.root), move(limb.joint), move(limb.end))

    logger.debug(
        "Column %d overhangs its band (%.1f..%.1f), shift=%.1f scale=%.3f",
        frame.column, left, right, shift, scale,
    )
    return replace(
        frame,
        hip=move(frame.hip),
        shoulder=move(frame.shoulder),
        head=move(frame.head),
        nose=move(frame.nose) if frame.nose is not None else None,
        left_leg=move_limb(frame.left_leg),
        right_leg=move_limb(frame.right_leg),
        left_arm=move_limb(frame.left_arm),
        right_arm=move_limb(frame.right_arm),
    )


def _capsule(
    draw: ImageDraw.ImageDraw,
    a: Point,
    b: Point,
    colour: tuple[int, int, int],
    width: int,
) -> None:
    """A thick round-capped segment between two joints."""
    draw.line([a.as_tuple(), b.as_tuple()], fill=colour, width=width)
    _joint(draw, a, width / 2, colour)
    _joint(draw, b, width / 2, colour)


def _joint(
    draw: ImageDraw.ImageDraw, p: Point, radius: float, colour: tuple[int, int, int],
) -> None:
    draw.ellipse(
        [p.x - radius, p.y - radius, p.x + radius, p.y + radius], fill=colour,
    )


def _limb(
    draw: ImageDraw.ImageDraw, limb: Limb, colour: tuple[int, int, int], width: int,
) -> None:
    _capsule(draw, limb.root, limb.joint, colour, width)
    _capsule(draw, limb.joint, limb.end, colour, width)


def _draw_figure(draw: ImageDraw.ImageDraw, frame: FigureFrame) -> None:
    """Paint one figure back to front so near limbs occlude far ones."""
    _limb(draw, frame.far_leg, FAR_COLOUR, LEG_WIDTH)
    _limb(draw, frame.far_arm, FAR_COLOUR, ARM_WIDTH)

    _capsule(draw, frame.hip, frame.shoulder, TORSO_COLOUR, SPINE_WIDTH)
    _joint(draw, frame.hip, JOINT_RADIUS, TORSO_COLOUR)
    _joint(draw, frame.shoulder, JOINT_RADIUS, TORSO_COLOUR)

    _joint(draw, frame.head, HEAD_RADIUS, HEAD_COLOUR)
    if frame.nose is not None:
        draw.line(
            [frame.head.as_tuple(), frame.nose.as_tuple()],
            fill=NOSE_COLOUR,
            width=NOSE_WIDTH,
        )

    _limb(draw, frame.near_leg, NEAR_COLOUR, LEG_WIDTH)
    _limb(draw, frame.near_arm, NEAR_COLOUR, ARM_WIDTH)
