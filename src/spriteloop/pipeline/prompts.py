"""Prompt construction for sprite sheet generation and prompt refinement."""

from __future__ import annotations

from typing import TYPE_CHECKING

from spriteloop.models.enums import SpriteStyle

if TYPE_CHECKING:
    from spriteloop.models.action import ActionPreset

# ---------------------------------------------------------------------------
# Style descriptors.
# ---------------------------------------------------------------------------
BACKGROUND_RULE = "PURE WHITE BACKGROUND. No shadows, no gradients on background."

STYLE_MODIFIERS: dict[SpriteStyle, str] = {
    SpriteStyle.PIXEL_ART: (
        "Pixel art style, precise pixel grid, limited color palette, retro 16-bit "
        "aesthetic, sharp hard edges, no anti-aliasing."
    ),
    SpriteStyle.FLAT_VECTOR: (
        "Modern flat vector art, clean distinct shapes, no gradients, adobe illustrator "
        "style, thick bold outlines, cell shading."
    ),
    SpriteStyle.SKETCH: (
        "Rough hand-drawn sketch style, pencil lines, loose artistic strokes, "
        "concept art aesthetic."
    ),
    SpriteStyle.NEO_RETRO: (
        "Neo-retro anime style, 90s fighting game aesthetic, cel-shading, hard thick "
        "outlines, professional game asset quality."
    ),
}

# Identity and anatomy failure modes the model tends to hallucinate.
DEFAULT_NEGATIVE = (
    "hair, wig, face, eyes, nose, mouth, lips, eyebrows, facial features, makeup, "
    "beard, mustache, different clothes, armor, shoes, boots, OVERLAPPING SPRITES, "
    "touching sprites, fused bodies, multiple people, background objects, cropped limbs, "
    "bad hands, missing fingers, extra fingers, fused fingers, blurry, messy lines, text, "
    "watermark, colored background, noise, artifacts."
)

REFINE_SYSTEM_INSTRUCTION = (
    "You are an expert Game Animator. Convert user requests into technical animation "
    "specs.\n"
    "Focus on: VISIBILITY of motion, EXAGGERATION principles, and ANATOMICAL "
    "consistency.\n"
    "Output only the technical description of the frames."
)

POSE_TRANSFER_TEMPLATE = """\
ROLE: You are a Senior Technical Artist at a top-tier 2D game studio.
TASK: Transfer the Character from IMAGE 1 onto the Geometry of IMAGE 2.

[INPUTS PROVIDED]
IMAGE 1: THE CHARACTER STYLE SOURCE (The "Paint").
IMAGE 2: THE STRUCTURAL POSE GUIDE (The "Canvas").

[CRITICAL - IDENTITY PRESERVATION]
1. SOURCE OF TRUTH: Image 1 is the absolute reference.
2. NO HALLUCINATIONS: If Image 1 is a bald mannequin, the output MUST be a bald \
mannequin. DO NOT add hair, eyes, nose, or mouth if they are missing in the source.
3. NO BEAUTIFICATION: Do not 'improve' the character design or add clothing details \
not present in Image 1.
4. EXACT MATCH: Keep the exact clothes, colors, and skin texture of Image 1.

[CRITICAL - ANIMATION LOOP]
1. SEAMLESS LOOP: Frame 6 must visually transition back to Frame 1.
2. CYCLICAL FLOW: Ensure the motion is continuous (e.g., for running: Contact -> \
Recoil -> Passing -> High Point -> Contact).

[POSE GUIDE LEGEND]
Red limbs are nearest to the camera, blue limbs are farthest. The black line on the \
head points where the face looks.

[RULES]
1. Match the exact limb positions of Image 2 (The Pose Guide).
2. Do not change the composition or grid layout of Image 2.
3. STRICT 6-COLUMN GRID: The output must match the 6-column layout of the pose guide \
exactly.
"""

LAYOUT_TEMPLATE = """\
ROLE: You are a Senior Technical Artist.
TASK: Create a professional 6-frame sprite sheet.
CONTEXT: The character is a FICTIONAL GAME ASSET.

[INPUTS]
IMAGE 1: REFERENCE CHARACTER.

[ANIMATION LOGIC]
{action_logic}

[CRITICAL - LAYOUT]
1. STRICT 6-COLUMN GRID: The output image must be composed of exactly 6 equal vertical \
columns.
2. SPACING: Center the character perfectly in each of the 6 columns.
3. NO OVERLAP: Characters must NOT touch the edges of their imaginary columns.
"""

TRAILER_TEMPLATE = """
[ART STYLE]
{style}

[ADDITIONAL INSTRUCTIONS]
{positive}

[ANATOMY CHECK]
Hands must have 5 clear fingers. No fused fingers. Correct joint articulation.

[NEGATIVE CONSTRAINTS]
{negative}
"""


def build_style_prompt(style: SpriteStyle) -> str:
    """Style instruction for *style*, always ending with the background rule."""
    modifier = STYLE_MODIFIERS.get(style, STYLE_MODIFIERS[SpriteStyle.NEO_RETRO])
    return f"{modifier} {BACKGROUND_RULE}"


def build_sheet_prompt(
    action: ActionPreset,
    style: SpriteStyle = SpriteStyle.NEO_RETRO,
    *,
    positive: str = "",
    negative: str = DEFAULT_NEGATIVE,
    with_pose_guide: bool = True,
) -> str:
    """Construct the full text prompt for one sprite sheet request.

    With a pose guide attached the model is told to transfer the character
    onto the guide's geometry; without one it gets the action's frame-by-frame
    logic and explicit grid layout rules instead.
    """
    if with_pose_guide:
        head = POSE_TRANSFER_TEMPLATE
    else:
        head = LAYOUT_TEMPLATE.format(action_logic=action.prompt_logic)

    trailer = TRAILER_TEMPLATE.format(
        style=build_style_prompt(style),
        positive=positive.strip(),
        negative=negative.strip(),
    )
    return head + trailer
