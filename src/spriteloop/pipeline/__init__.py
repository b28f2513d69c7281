"""SpriteLoop generation pipeline - pose guides, prompts, slicing."""

from spriteloop.pipeline.pose_guide import (
    RenderSurfaceError,
    pose_at_phase,
    pose_figure,
    pose_figures,
    render_pose_guide,
    save_pose_guide,
    synthesize,
)
from spriteloop.pipeline.prompts import build_sheet_prompt, build_style_prompt
from spriteloop.pipeline.slicing import SlicingError, save_frames, slice_sprite_sheet
from spriteloop.pipeline.sprite_gen import (
    ReferenceImageError,
    SpriteSheetResult,
    generate_sprite_sheet,
)

__all__ = [
    "ReferenceImageError",
    "RenderSurfaceError",
    "SlicingError",
    "SpriteSheetResult",
    "build_sheet_prompt",
    "build_style_prompt",
    "generate_sprite_sheet",
    "pose_at_phase",
    "pose_figure",
    "pose_figures",
    "render_pose_guide",
    "save_frames",
    "save_pose_guide",
    "slice_sprite_sheet",
    "synthesize",
]
