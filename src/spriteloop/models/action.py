"""Action presets - the library of animations a sheet can be generated for."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from spriteloop.models.enums import ActionFamily


class ActionPreset(BaseModel):
    """A named animation with its prompt logic and motion family."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str
    prompt_logic: str
    family: ActionFamily = ActionFamily.NONE
    pose_guide: bool = True


ACTION_PRESETS: list[ActionPreset] = [
    ActionPreset(
        id="IDLE_BREATHE",
        label="Idle",
        description="Breathing Loop",
        prompt_logic=(
            "Action: BREATHING LOOP (Sine Wave). Frame 1: Neutral. Frame 2: Inhale Start. "
            "Frame 3: Inhale Mid. Frame 4: MAX INHALE. Frame 5: Exhale Start. "
            "Frame 6: Exhale End."
        ),
        family=ActionFamily.IDLE,
    ),
    ActionPreset(
        id="WALK_CYCLE",
        label="Walk",
        description="Side Scroll",
        prompt_logic=(
            "Action: WALK CYCLE (Side View). Frame 1: Contact. Frame 2: Recoil. "
            "Frame 3: Passing. Frame 4: High Point. Frame 5: Contact. Frame 6: Recovery."
        ),
        family=ActionFamily.WALK,
    ),
    ActionPreset(
        id="RUN_CYCLE",
        label="Run",
        description="Fast Sprint",
        prompt_logic=(
            "Action: RUN CYCLE. Forward lean 45°. Arms pumping. Legs full extension. "
            "Dynamic motion lines."
        ),
        family=ActionFamily.RUN,
    ),
    ActionPreset(
        id="RUN_START_STOP",
        label="Sprint",
        description="Start/Stop",
        prompt_logic=(
            "Action: RUN START AND STOP. Frame 1: Anticipation lean. Frame 2: Push off. "
            "Frame 3-5: Full stride. Frame 6: Brake, lean back."
        ),
        family=ActionFamily.RUN,
    ),
    ActionPreset(
        id="STRAFE_CYCLE",
        label="Strafe",
        description="Sidestep",
        prompt_logic=(
            "Action: STRAFE. Body faces camera while stepping sideways. "
            "Feet never cross. Weight stays centred."
        ),
        family=ActionFamily.STRAFE,
    ),
    ActionPreset(
        id="JUMP_FULL",
        label="Jump",
        description="Launch/Land",
        prompt_logic=(
            "Action: JUMP ARC. Frame 1: Squash. Frame 2: Launch. Frame 3: Rise. "
            "Frame 4: Apex. Frame 5: Fall. Frame 6: Land."
        ),
        family=ActionFamily.JUMP,
    ),
    ActionPreset(
        id="ATTACK_MELEE",
        label="Attack",
        description="Combo Hit",
        prompt_logic=(
            "Action: MELEE ATTACK. Frame 1: Windup. Frame 2: Step. Frame 3: IMPACT. "
            "Frame 4: Follow-thru. Frame 5: Retract. Frame 6: Idle."
        ),
        family=ActionFamily.ATTACK,
    ),
    ActionPreset(
        id="GUARD_BLOCK",
        label="Guard",
        description="Defense",
        prompt_logic=(
            "Action: GUARD. Frame 1-6: Steady defensive stance. Knees bent. "
            "Arms shielding face. Minimal movement."
        ),
        family=ActionFamily.GUARD,
    ),
    ActionPreset(
        id="HIT_REACTION",
        label="Hit",
        description="Damage",
        prompt_logic=(
            "Action: TAKE DAMAGE. Frame 1: Impact. Frame 2: Crunch. Frame 3: Stumble. "
            "Frame 4: Slide. Frame 5: Recover. Frame 6: Idle."
        ),
        family=ActionFamily.HIT,
        pose_guide=False,
    ),
    ActionPreset(
        id="DASH_SLIDE",
        label="Dash",
        description="Evasion",
        prompt_logic=(
            "Action: DASH. Low profile slide. Speed lines. Horizontal stretch. One leg lead."
        ),
        family=ActionFamily.DASH,
    ),
    ActionPreset(
        id="CLIMB_LADDER",
        label="Climb",
        description="Vertical",
        prompt_logic=(
            "Action: LADDER CLIMB. Back view. Frame 1: R-Hand Up. Frame 2: R-Leg Up. "
            "Frame 3: Pull. Frame 4: L-Hand Up. Frame 5: L-Leg Up. Frame 6: Pull."
        ),
        family=ActionFamily.CLIMB,
        pose_guide=False,
    ),
    ActionPreset(
        id="CAST_SPELL",
        label="Magic",
        description="Channeling",
        prompt_logic=(
            "Action: MAGIC CAST. Frame 1: Gather. Frame 2: Charge. Frame 3: RELEASE. "
            "Frame 4: Projectile. Frame 5: Recoil. Frame 6: Cool."
        ),
        family=ActionFamily.CAST,
    ),
    ActionPreset(
        id="VICTORY_POSE",
        label="Win",
        description="Celebration",
        prompt_logic=(
            "Action: VICTORY. Frame 1: Shock. Frame 2: Fist Pump. Frame 3: Jump. "
            "Frame 4: Pose High. Frame 5: Hold. Frame 6: Land."
        ),
        family=ActionFamily.VICTORY,
        pose_guide=False,
    ),
    ActionPreset(
        id="DEATH",
        label="Die",
        description="Game Over",
        prompt_logic=(
            "Action: DEATH. Frame 1: Shock. Frame 2: Buckle. Frame 3: Fall Back. "
            "Frame 4: Impact. Frame 5: Bounce. Frame 6: Flat."
        ),
        family=ActionFamily.DEATH,
        pose_guide=False,
    ),
]

_PRESETS_BY_ID: dict[str, ActionPreset] = {p.id: p for p in ACTION_PRESETS}


def get_action(action_id: str) -> ActionPreset | None:
    """Look up a preset by id (case-insensitive)."""
    return _PRESETS_BY_ID.get(action_id.strip().upper())


def resolve_family(action_id: str) -> ActionFamily:
    """Map an action id to its motion family.

    Registered presets use their declared family.  Any other id is resolved
    by its leading ``_``-separated token only, so ``"ATTACK_HEAVY"`` is an
    attack and ``"WALK_RUN"`` is a walk.  Ids whose leading token is not a
    family name resolve to :attr:`ActionFamily.NONE`.
    """
    preset = get_action(action_id)
    if preset is not None:
        return preset.family

    token = action_id.strip().upper().split("_", 1)[0]
    try:
        family = ActionFamily(token)
    except ValueError:
        return ActionFamily.NONE
    return family
