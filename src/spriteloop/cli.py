"""CLI entry point using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from spriteloop.models.enums import Archetype, Direction, SpriteStyle

if TYPE_CHECKING:
    from spriteloop.backend.base import GenerationBackend
    from spriteloop.config import AppConfig

app = typer.Typer(
    name="spriteloop",
    help="Pose-guided 6-frame sprite sheet generator.",
    no_args_is_help=True,
)

LOG_FORMAT = "%(levelname)-5s | %(name)-24s | %(message)s"


def _make_backend(config: AppConfig, backend: str | None) -> tuple[str, GenerationBackend]:
    backend_name = backend or config.active_backend
    if backend_name == "mock":
        from spriteloop.backend.mock import MockBackend

        return backend_name, MockBackend()
    if backend_name == "gemini":
        from spriteloop.backend.gemini import GeminiBackend

        return backend_name, GeminiBackend(config.gemini)
    typer.echo(f"Error: unknown backend '{backend_name}' (use gemini or mock)", err=True)
    raise typer.Exit(1)


@app.command()
def guide(
    action: Annotated[str, typer.Argument(help="Action id, e.g. WALK_CYCLE")],
    direction: Annotated[
        Direction, typer.Option("--direction", "-d", help="Camera direction")
    ] = Direction.SIDE,
    archetype: Annotated[
        Archetype, typer.Option("--archetype", "-a", help="Body archetype")
    ] = Archetype.VANGUARD,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output PNG path"),
    ] = None,
) -> None:
    """Render the procedural pose guide for an action."""
    from spriteloop.models.figure import PoseGuideRequest
    from spriteloop.pipeline.pose_guide import RenderSurfaceError, save_pose_guide

    request = PoseGuideRequest(action_id=action, direction=direction, archetype=archetype)
    out_path = output or Path(f"{action.lower()}_{direction.lower()}_pose_guide.png")
    try:
        save_pose_guide(request, out_path)
    except RenderSurfaceError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    typer.echo(f"Saved: {out_path}")


@app.command()
def generate(
    reference: Annotated[Path, typer.Argument(help="Reference character image")],
    action: Annotated[str, typer.Option("--action", "-A", help="Action id")] = "IDLE_BREATHE",
    style: Annotated[
        SpriteStyle | None, typer.Option("--style", "-s", help="Render style")
    ] = None,
    direction: Annotated[
        Direction | None, typer.Option("--direction", "-d", help="Camera direction")
    ] = None,
    archetype: Annotated[
        Archetype | None, typer.Option("--archetype", "-a", help="Body archetype")
    ] = None,
    positive: Annotated[
        str, typer.Option("--positive", "-p", help="Additional instructions")
    ] = "",
    negative: Annotated[
        str | None, typer.Option("--negative", "-n", help="Negative constraints")
    ] = None,
    no_guide: Annotated[
        bool, typer.Option("--no-guide", help="Do not attach a pose guide")
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output directory"),
    ] = None,
    backend: Annotated[
        str | None,
        typer.Option("--backend", "-b", help="Backend: gemini or mock"),
    ] = None,
) -> None:
    """Generate a 6-frame sprite sheet from a reference image."""
    import asyncio

    from spriteloop.backend.base import GenerationError
    from spriteloop.config import load_config
    from spriteloop.models.action import get_action
    from spriteloop.pipeline.pose_guide import RenderSurfaceError
    from spriteloop.pipeline.slicing import SlicingError
    from spriteloop.pipeline.sprite_gen import ReferenceImageError, generate_sprite_sheet

    preset = get_action(action)
    if preset is None:
        typer.echo(f"Error: unknown action '{action}' (see 'spriteloop actions')", err=True)
        raise typer.Exit(1)

    config = load_config()
    backend_name, gen_backend = _make_backend(config, backend)

    async def _run() -> None:
        await gen_backend.connect()
        try:
            typer.echo(f"Generating ({backend_name}): {preset.id}")
            result = await generate_sprite_sheet(
                reference,
                preset,
                gen_backend,
                config,
                style=style,
                direction=direction,
                archetype=archetype,
                positive=positive,
                negative=negative,
                use_pose_guide=False if no_guide else None,
                output_dir=output,
            )
        finally:
            await gen_backend.disconnect()

        if result.pose_guide_path is not None:
            typer.echo(f"Pose guide: {result.pose_guide_path}")
        typer.echo(f"Sheet: {result.sheet_path}")
        for path in result.frame_paths:
            typer.echo(f"Saved: {path}")

    try:
        asyncio.run(_run())
    except (GenerationError, ReferenceImageError, RenderSurfaceError, SlicingError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


@app.command("slice")
def slice_sheet(
    sheet: Annotated[Path, typer.Argument(help="Sprite sheet image")],
    frames: Annotated[int, typer.Option("--frames", "-f", help="Number of frames")] = 6,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output directory"),
    ] = None,
) -> None:
    """Slice a sprite sheet into individual frame PNGs."""
    from spriteloop.pipeline.slicing import SlicingError, save_frames, slice_sprite_sheet

    try:
        images = slice_sprite_sheet(sheet, frame_count=frames)
    except SlicingError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    for path in save_frames(images, output or sheet.parent, sheet.stem):
        typer.echo(f"Saved: {path}")


@app.command()
def actions() -> None:
    """List the built-in action presets."""
    from spriteloop.models.action import ACTION_PRESETS

    for preset in ACTION_PRESETS:
        guide_flag = "guide" if preset.pose_guide else "text"
        typer.echo(f"{preset.id:<16} {preset.label:<8} {guide_flag:<6} {preset.description}")


@app.command()
def refine(
    concept: Annotated[str, typer.Argument(help="Free-form animation idea")],
    backend: Annotated[
        str | None,
        typer.Option("--backend", "-b", help="Backend: gemini or mock"),
    ] = None,
) -> None:
    """Turn a rough idea into a technical animation description."""
    import asyncio

    from spriteloop.backend.base import GenerationError
    from spriteloop.config import load_config

    if not concept.strip():
        typer.echo("Error: concept is empty", err=True)
        raise typer.Exit(1)

    config = load_config()
    _, gen_backend = _make_backend(config, backend)

    async def _run() -> str:
        await gen_backend.connect()
        try:
            return await gen_backend.refine_prompt(concept)
        finally:
            await gen_backend.disconnect()

    try:
        refined = asyncio.run(_run())
    except GenerationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    typer.echo(refined)


@app.command()
def check(
    backend: Annotated[
        str | None,
        typer.Option("--backend", "-b", help="Backend: gemini or mock"),
    ] = None,
) -> None:
    """Check backend connectivity and report status."""
    import asyncio

    from spriteloop.config import load_config

    config = load_config()
    backend_name, gen_backend = _make_backend(config, backend)

    async def _run() -> None:
        await gen_backend.connect()
        try:
            available = await gen_backend.is_available()
            if not available:
                typer.echo(f"{backend_name}: unavailable")
                typer.echo("Status: offline")
                raise typer.Exit(1)
            models = await gen_backend.get_models()
            typer.echo(f"{backend_name}: connected")
            typer.echo(f"Models: {', '.join(models)}")
            typer.echo("Status: ready")
        finally:
            await gen_backend.disconnect()

    asyncio.run(_run())


@app.command("init-config")
def init_config(
    path: Annotated[
        Path | None,
        typer.Option("--path", help="Where to write config.toml"),
    ] = None,
) -> None:
    """Write the current settings to config.toml."""
    from spriteloop.config import load_config, save_config

    saved = save_config(load_config(), path)
    typer.echo(f"Settings saved to {saved}")


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool, typer.Option("--version", "-v", help="Show version")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Enable debug logging")
    ] = False,
) -> None:
    """SpriteLoop - pose-guided 6-frame sprite sheet generator."""
    if version:
        from spriteloop import __version__

        typer.echo(f"spriteloop {__version__}")
        raise typer.Exit()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )
