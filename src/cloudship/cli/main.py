"""Command-line interface for cloudship."""

import asyncio
import logging
import sys
from collections.abc import Sequence
from enum import IntEnum
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Prompt

from cloudship.activities import evidence as evidence_activity
from cloudship.activities.resolve import detect_project
from cloudship.cli.render import render_detection, render_next_steps, render_no_detection, render_plan
from cloudship.detectors import PROJECT_TYPES, get_project_type, indicator_names
from cloudship.exceptions import ConfigError, UsageError
from cloudship.models.detection import ProjectOverrides
from cloudship.settings import get_settings, load_project_config
from cloudship.workflows.ship import Scaffold, ship_graph
from cloudship.workflows.state import ChooseCallback, Option, Severity, ShipState, first_option

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    PARTIAL = 2  # scaffolded, but shipping failed
    DECLINED = 3
    USAGE = 64
    CONFIG = 65


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)


app = typer.Typer(
    name="cloudship",
    help="Scaffold and deploy container projects to Cloudflare Workers.",
)


def _validate_project_path(path: Path) -> Path:
    if not path.exists():
        raise typer.BadParameter(f"Path does not exist: {path}")
    if not path.is_dir():
        raise typer.BadParameter(f"Path is not a directory: {path}")
    return path.resolve()


def _make_progress_callback(console: Console):
    """Create a Rich-based progress callback."""
    severity_styles = {
        Severity.INFO: ("blue", "•"),
        Severity.SUCCESS: ("green", "✓"),
        Severity.WARNING: ("yellow", "!"),
        Severity.ERROR: ("red", "✗"),
    }

    def callback(severity: Severity, message: str) -> None:
        color, icon = severity_styles[severity]
        console.print(f"  [{color}]{icon}[/{color}] {message}")

    return callback


def _make_choice_prompt_callback(console: Console) -> ChooseCallback:
    """Create a Rich-based numbered choice prompt."""

    def callback(label: str, options: Sequence[Option]) -> Any:
        console.print(f"\n[bold]{label}[/bold]")
        for index, option in enumerate(options, 1):
            console.print(f"  [cyan]{index}[/cyan] {option.label}")

        choice = Prompt.ask(
            "Choice",
            choices=[str(index) for index in range(1, len(options) + 1)],
            default="1",
            console=console,
        )
        return options[int(choice) - 1].value

    return callback


def _build_overrides(
    cwd: Path,
    *,
    type_id: str | None,
    name: str | None,
    class_name: str | None,
    max_instances: int | None,
    migration_tag: str | None,
    force: bool,
    no_prompt: bool,
) -> ProjectOverrides:
    """Combine command-line flags with the project config file.

    Flags given on the command line win over the config file, which wins
    over application settings.
    """
    config = load_project_config(cwd)
    if max_instances is None:
        max_instances = config.max_instances
    if max_instances is None:
        max_instances = get_settings().max_instances

    return ProjectOverrides(
        type_id=type_id or config.type_id,
        name=name or config.name,
        class_name=class_name or config.class_name,
        max_instances=max_instances,
        migration_tag=migration_tag or config.migration_tag,
        force=force,
        no_prompt=no_prompt,
    )


async def _run(
    console: Console,
    cwd: Path,
    target: str | None,
    overrides: ProjectOverrides,
    choose: ChooseCallback,
    *,
    ship: bool,
    show_plan: bool,
    detect_only: bool,
) -> ExitCode:
    evidence = await evidence_activity.scan(cwd, [target] if target else [], indicator_names())

    try:
        detection = detect_project(PROJECT_TYPES, evidence, overrides, choose)
    except UsageError as e:
        render_no_detection(console, str(e), PROJECT_TYPES)
        return ExitCode.USAGE

    if detect_only:
        render_detection(console, detection)
        return ExitCode.SUCCESS

    project_type = get_project_type(detection.type_id)
    if project_type is None:
        console.print(f"[red]Unsupported project type '{detection.type_id}'[/red]")
        return ExitCode.USAGE

    if show_plan:
        # Dry run: never prompts
        plan = await project_type.plan(detection, overrides, cwd, first_option)
        if plan is not None:
            render_plan(console, detection, plan, project_type, ship)
        return ExitCode.SUCCESS

    console.print(f"\n[bold]cloudship[/bold] - {detection.display_name.lower()} project in {cwd.name}\n")
    state = ShipState(
        path=cwd,
        detection=detection,
        overrides=overrides,
        ship=ship,
        on_progress=_make_progress_callback(console),
        choose=choose,
    )
    run = await ship_graph.run(Scaffold(), state=state)
    outcome = run.output

    if outcome.declined:
        return ExitCode.DECLINED

    if outcome.failed_step is not None:
        console.print("\n[yellow]Shipping failed, but scaffolding was successful[/yellow]")
        console.print("[dim]  Fix the problem above and run: cloudship --ship[/dim]\n")
        return ExitCode.PARTIAL

    if outcome.shipped:
        console.print("\n[green bold]✓ Deployment complete![/green bold]\n")
    else:
        console.print("\n[green bold]✓ Scaffolding complete![/green bold]")
        render_next_steps(console)
    return ExitCode.SUCCESS


@app.command()
def main(
    target: Annotated[
        str | None,
        typer.Argument(help="Container image reference, e.g. nginx:alpine."),
    ] = None,
    cwd: Annotated[
        Path,
        typer.Option("--cwd", help="Project directory. Defaults to current directory."),
    ] = Path("."),
    ship: Annotated[
        bool,
        typer.Option("--ship", help="Install dependencies and deploy after scaffolding."),
    ] = False,
    show_plan: Annotated[
        bool,
        typer.Option("--plan", help="Show what would be done without doing it."),
    ] = False,
    detect_only: Annotated[
        bool,
        typer.Option("--detect", help="Only run detection and print the result."),
    ] = False,
    type_id: Annotated[
        str | None,
        typer.Option("--type", help="Force a project type instead of auto-detecting."),
    ] = None,
    name: Annotated[
        str | None,
        typer.Option("--name", help="Project name."),
    ] = None,
    class_name: Annotated[
        str | None,
        typer.Option("--class", help="Container class name."),
    ] = None,
    max_instances: Annotated[
        int | None,
        typer.Option("--max-instances", min=1, help="Maximum container instances."),
    ] = None,
    migration_tag: Annotated[
        str | None,
        typer.Option("--migration-tag", help="Tag for a new migration entry."),
    ] = None,
    no_prompt: Annotated[
        bool,
        typer.Option("--no-prompt", help="Never prompt; take the default choice."),
    ] = False,
    force: Annotated[
        bool,
        typer.Option("--force", help="Modify existing project files without asking."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
) -> None:
    """Detect, scaffold and optionally deploy a container project."""
    _setup_logging(verbose)
    cwd = _validate_project_path(cwd)
    console = Console()

    overrides = _build_overrides(
        cwd,
        type_id=type_id,
        name=name,
        class_name=class_name,
        max_instances=max_instances,
        migration_tag=migration_tag,
        force=force,
        no_prompt=no_prompt,
    )
    choose = first_option if overrides.no_prompt else _make_choice_prompt_callback(console)

    try:
        exit_code = asyncio.run(
            _run(
                console,
                cwd,
                target,
                overrides,
                choose,
                ship=ship,
                show_plan=show_plan,
                detect_only=detect_only,
            )
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled[/yellow]")
        sys.exit(130)
    except UsageError as e:
        logger.debug("Usage error", exc_info=True)
        console.print(f"\n[red]Error:[/red] {e}")
        exit_code = ExitCode.USAGE
    except ConfigError as e:
        logger.debug("Configuration error", exc_info=True)
        console.print(f"\n[red]Error:[/red] {e}")
        exit_code = ExitCode.CONFIG

    raise typer.Exit(code=int(exit_code))


if __name__ == "__main__":
    app()
