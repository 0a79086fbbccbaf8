"""CLI entry point for the storyboard generator."""

import logging
import typer
from pathlib import Path
from typing import Optional

from . import __version__
from .auth import LoginMode, login as enter_login_mode
from .config import config
from .credits import CreditLedger, CreditStore, IMAGE_COST, SMART_PASTE_COST, script_cost
from .errors import BudgetInsufficient, CineGenError, LoginError
from .models import AspectRatio, Scene, SceneStatus, Storyboard
from .orchestrator import Orchestrator
from .registry import SceneRegistry
from .session import Session

app = typer.Typer(
    name="cinegen",
    help="AI-powered storyboard generator",
    no_args_is_help=True
)

STATUS_ICONS = {
    SceneStatus.IDLE: "⏳",
    SceneStatus.GENERATING: "🔄",
    SceneStatus.COMPLETED: "✅",
    SceneStatus.FAILED: "❌",
}


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"cinegen version {__version__}")
        raise typer.Exit()


def _credits_label(ledger: CreditLedger) -> str:
    return "∞" if ledger.is_infinite else str(ledger.remaining)


def load_session(storyboard_path: Path) -> Session:
    """Load the ledger and storyboard, creating a default storyboard if needed."""
    ledger = CreditLedger.load(CreditStore())
    if storyboard_path.exists():
        try:
            storyboard = Storyboard.from_yaml(storyboard_path)
        except Exception as e:
            typer.echo(f"❌ Error loading storyboard: {e}")
            raise typer.Exit(1)
        return Session.from_storyboard(storyboard, ledger)

    return Session(
        ledger=ledger,
        registry=_fresh_registry(config.default_scene_count),
        style=config.default_style,
        aspect_ratio=AspectRatio(config.default_aspect_ratio),
    )


def _fresh_registry(count: int) -> SceneRegistry:
    registry = SceneRegistry()
    registry.initialize(count)
    return registry


def save_session(session: Session, storyboard_path: Path) -> None:
    try:
        session.to_storyboard().to_yaml(storyboard_path)
    except Exception as e:
        typer.echo(f"❌ Error saving storyboard: {e}")
        raise typer.Exit(1)


def _provider():
    from .services import StudioProvider

    return StudioProvider()


def _preview(text: str, width: int = 60) -> str:
    return text[:width] + "..." if len(text) > width else text


StoryboardOption = typer.Option(
    None,
    "--storyboard",
    "-b",
    help="Path to storyboard YAML file (defaults to CINEGEN_STORYBOARD)",
    file_okay=True,
    dir_okay=False
)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
) -> None:
    """CineGen - Turn stories into storyboards using AI."""
    pass


@app.command()
def login(
    mode: LoginMode = typer.Option(
        LoginMode.KEY,
        "--mode",
        "-m",
        help="Login mode (dev grants unlimited credits)"
    ),
    token: str = typer.Option(
        "",
        "--token",
        "-t",
        help="Access key or passphrase (ignored in dev mode)"
    ),
) -> None:
    """Log in and select the credit mode."""
    ledger = CreditLedger.load(CreditStore())
    try:
        enter_login_mode(mode, token, ledger)
    except LoginError as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(1)

    typer.echo(f"✅ Logged in ({mode.value})")
    typer.echo(f"   Credits: {_credits_label(ledger)}")


@app.command()
def credits() -> None:
    """Show the credit balance and price table."""
    ledger = CreditLedger.load(CreditStore())
    typer.echo(f"💳 Credits: {_credits_label(ledger)}")
    typer.echo(f"   Script generation: {script_cost(1)} per scene")
    typer.echo(f"   Image generation: {IMAGE_COST} per scene")
    typer.echo(f"   Smart paste: {SMART_PASTE_COST}")


@app.command()
def new(
    scenes: int = typer.Option(
        config.default_scene_count,
        "--scenes",
        "-s",
        help="Number of scenes",
        min=1,
        max=100
    ),
    aspect_ratio: AspectRatio = typer.Option(
        AspectRatio(config.default_aspect_ratio),
        "--aspect-ratio",
        "-a",
        help="Image aspect ratio"
    ),
    style: Optional[str] = typer.Option(
        None,
        "--style",
        help="Global visual style"
    ),
    storyboard: Optional[Path] = StoryboardOption,
) -> None:
    """Start a fresh storyboard, discarding all scenes."""
    path = storyboard or config.storyboard_file
    session = load_session(path)
    session.registry.initialize(scenes)
    session.aspect_ratio = aspect_ratio
    session.summary = ""
    if style:
        session.style = style
    save_session(session, path)

    typer.echo(f"🎬 New storyboard: {path}")
    typer.echo(f"   Scenes: {scenes}")
    typer.echo(f"   Aspect ratio: {aspect_ratio.value}")


@app.command()
def status(storyboard: Optional[Path] = StoryboardOption) -> None:
    """Show storyboard status."""
    path = storyboard or config.storyboard_file
    if not path.exists():
        typer.echo(f"❌ No storyboard found at {path}")
        typer.echo("   Run 'cinegen new' to create one")
        raise typer.Exit(1)

    session = load_session(path)
    typer.echo(f"📁 Storyboard: {path}")
    typer.echo(f"   Credits: {_credits_label(session.ledger)}")
    typer.echo(f"   Aspect ratio: {session.aspect_ratio.value}")
    typer.echo(f"   Style: {_preview(session.style)}")

    typer.echo("\n📽️  Scenes:")
    for scene in session.registry:
        typer.echo(f"   {STATUS_ICONS[scene.status]} {scene.id}: {scene.status.value}")
        if scene.prompt:
            typer.echo(f"      → {_preview(scene.prompt)}")


@app.command()
def prompt(
    scene_id: int = typer.Argument(..., help="Scene id"),
    text: str = typer.Argument(..., help="Scene description"),
    storyboard: Optional[Path] = StoryboardOption,
) -> None:
    """Set the description of one scene."""
    path = storyboard or config.storyboard_file
    session = load_session(path)
    if session.registry.get(scene_id) is None:
        typer.echo(f"⚠️  No scene {scene_id}; nothing changed")
        raise typer.Exit(1)
    session.registry.set_prompt(scene_id, text)
    save_session(session, path)
    typer.echo(f"✅ Scene {scene_id} updated")


@app.command()
def paste(
    source: Path = typer.Argument(
        ...,
        help="Text file with one scene description per line",
        exists=True,
        dir_okay=False
    ),
    storyboard: Optional[Path] = StoryboardOption,
) -> None:
    """Assign lines of a text file to scenes in order."""
    path = storyboard or config.storyboard_file
    session = load_session(path)
    assigned = session.registry.bulk_assign(source.read_text())
    save_session(session, path)
    typer.echo(f"✅ Assigned {assigned} scene descriptions")


@app.command("smart-paste")
def smart_paste(
    source: Path = typer.Argument(
        ...,
        help="Text file with 'Scene N: ...' segments",
        exists=True,
        dir_okay=False
    ),
    storyboard: Optional[Path] = StoryboardOption,
) -> None:
    """Parse 'Scene N' segments and assign them by number."""
    path = storyboard or config.storyboard_file
    session = load_session(path)
    orchestrator = Orchestrator(session, provider=_provider())

    try:
        matched = orchestrator.smart_paste(source.read_text())
    except (BudgetInsufficient, ValueError) as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(1)

    if not matched:
        typer.echo("⚠️  No 'Scene N' markers found; nothing changed")
        return

    save_session(session, path)
    typer.echo(f"✅ Parsed {matched} scene segments ({SMART_PASTE_COST} credits)")
    typer.echo(f"   Credits: {_credits_label(session.ledger)}")


@app.command()
def script(
    summary: str = typer.Argument(..., help="Story summary to break into scenes"),
    style: Optional[str] = typer.Option(None, "--style", help="Override the global style"),
    storyboard: Optional[Path] = StoryboardOption,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Generate scene descriptions from a story summary."""
    setup_logging(verbose)
    path = storyboard or config.storyboard_file
    session = load_session(path)
    if style:
        session.style = style

    cost = script_cost(len(session.registry))
    typer.echo(f"🎬 Writing script for {len(session.registry)} scenes ({cost} credits)")

    try:
        config.validate_required()
        orchestrator = Orchestrator(session, provider=_provider())
        prompts = orchestrator.generate_script(summary)
    except (BudgetInsufficient, ValueError) as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(1)
    except CineGenError as e:
        typer.echo(f"❌ Error generating script: {e}")
        raise typer.Exit(1)

    save_session(session, path)
    typer.echo(f"✅ Received {len(prompts)} scene descriptions")
    for scene in session.registry:
        typer.echo(f"   • {scene.id}: {_preview(scene.prompt, 70)}")
    typer.echo(f"   Credits: {_credits_label(session.ledger)}")


@app.command()
def generate(
    storyboard: Optional[Path] = StoryboardOption,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Generate images for every scene that is not completed."""
    setup_logging(verbose)
    path = storyboard or config.storyboard_file
    session = load_session(path)

    try:
        config.validate_imagen_required()
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    total = len(session.registry)

    def report(index: int, scene: Scene) -> None:
        typer.echo(f"   [{index + 1}/{total}] {_preview(scene.effective_prompt(), 50)}")

    orchestrator = Orchestrator(
        session,
        provider=_provider(),
        on_progress=report,
        on_scene_done=lambda scene: save_session(session, path),
    )
    typer.echo(f"⏳ Generating {len(session.registry.pending())} images...\n")

    try:
        result = orchestrator.generate_all()
    except BudgetInsufficient as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(1)
    finally:
        save_session(session, path)

    typer.echo(f"\n📊 Summary:")
    typer.echo(f"   Generated: {result.succeeded}")
    typer.echo(f"   Failed: {result.failed}")
    typer.echo(f"   Credits: {_credits_label(session.ledger)}")

    if result.failed > 0:
        typer.echo(f"\n⚠️  {result.failed} scene(s) failed; run 'cinegen generate' to retry")
        raise typer.Exit(1)


@app.command()
def regenerate(
    scene_id: int = typer.Argument(..., help="Scene id"),
    storyboard: Optional[Path] = StoryboardOption,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Generate a new image for one scene."""
    setup_logging(verbose)
    path = storyboard or config.storyboard_file
    session = load_session(path)

    try:
        config.validate_imagen_required()
        orchestrator = Orchestrator(session, provider=_provider())
        scene = orchestrator.regenerate(scene_id)
    except (BudgetInsufficient, ValueError) as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(1)
    except KeyError:
        typer.echo(f"❌ No scene {scene_id}")
        raise typer.Exit(1)
    finally:
        save_session(session, path)

    if scene.status == SceneStatus.FAILED:
        typer.echo(f"❌ Scene {scene_id}: {scene.error}")
        raise typer.Exit(1)
    typer.echo(f"✅ Scene {scene_id} regenerated")
    typer.echo(f"   Credits: {_credits_label(session.ledger)}")


@app.command()
def export(
    output: Path = typer.Option(
        Path("./exports"),
        "--output",
        "-o",
        help="Output directory"
    ),
    scene_id: Optional[int] = typer.Option(
        None,
        "--scene",
        "-s",
        help="Export only this scene's image"
    ),
    storyboard: Optional[Path] = StoryboardOption,
) -> None:
    """Export completed scene images."""
    from .export import ExportAssembler

    path = storyboard or config.storyboard_file
    session = load_session(path)
    assembler = ExportAssembler(output)

    try:
        if scene_id is not None:
            scene = session.registry.get(scene_id)
            written = assembler.export_single(scene) if scene else None
        else:
            written = assembler.export_all(session.registry)
    except ValueError as e:
        typer.echo(f"❌ Error exporting images: {e}")
        raise typer.Exit(1)

    if written is None:
        typer.echo("⚠️  Nothing to export")
        raise typer.Exit(1)
    typer.echo(f"✅ Exported: {written}")


if __name__ == "__main__":
    app()
