"""Rich rendering for detection results and scaffold plans."""

from rich.console import Console
from rich.table import Table

from cloudship.detectors.base import ProjectType
from cloudship.models.detection import DetectionResult
from cloudship.models.scaffold import FileOperation, ScaffoldPlan
from cloudship.workflows.state import Step

_OPERATION_STYLES = {
    FileOperation.CREATE: "green",
    FileOperation.UPDATE: "yellow",
    FileOperation.SKIP: "dim",
}


def _percent(confidence: float) -> str:
    return f"{round(confidence * 100)}%"


def render_detection(console: Console, result: DetectionResult) -> None:
    console.print(f"\n[blue bold]Detected: {result.display_name}[/blue bold]")
    console.print(f"[green]Confidence: {_percent(result.confidence)}[/green]")

    console.print("\n[yellow]Indicators:[/yellow]")
    for indicator in result.indicators:
        console.print(f"  [dim]- {indicator}[/dim]")

    metadata = {key: value for key, value in result.metadata.items() if value}
    if metadata:
        console.print("\n[yellow]Metadata:[/yellow]")
        for key, value in metadata.items():
            console.print(f"  [dim]{key}: {value}[/dim]")


def render_no_detection(console: Console, message: str, project_types: tuple[ProjectType, ...]) -> None:
    console.print(f"\n[red]{message}[/red]\n")
    console.print("[yellow]Supported types:[/yellow]")
    for project_type in project_types:
        indicators = ", ".join(project_type.indicator_names[:3])
        console.print(f"  [dim]- {project_type.id} ({indicators}, image reference)[/dim]")
    console.print("\n[yellow]Try:[/yellow]")
    console.print("  [dim]- cloudship --type container <image>[/dim]")
    console.print("  [dim]- cloudship --detect (to see what was found)[/dim]")


def render_plan(
    console: Console,
    result: DetectionResult,
    plan: ScaffoldPlan,
    project_type: ProjectType,
    ship: bool,
) -> None:
    """Show what a scaffold (and ship) would do, without doing it."""
    console.print("\n[blue bold]Execution Plan[/blue bold]\n")
    console.print("[yellow]Detected project type:[/yellow]")
    console.print(f"  {result.display_name} ({_percent(result.confidence)} confidence)")
    console.print(f"  class {plan.class_name}, binding {plan.binding_name}, port {plan.port}")

    table = Table(title="Files")
    table.add_column("File", style="cyan")
    table.add_column("Action")
    table.add_column("Note", style="dim")
    for action in plan.actions:
        style = _OPERATION_STYLES[action.operation]
        relative = action.path.relative_to(plan.cwd).as_posix()
        table.add_row(relative, f"[{style}]{action.operation}[/{style}]", action.reason)
    console.print(table)
    console.print(f"[dim]{len(plan.changes())} of {len(plan.actions)} file(s) would change[/dim]")

    console.print("\n[yellow]Commands that would run:[/yellow]")
    if ship:
        for step in Step:
            console.print(f"  [dim]- {' '.join(project_type.step_command(step))}[/dim]")
    else:
        console.print("  [dim]- (none - scaffold only)[/dim]")

    console.print("\n[green]To execute this plan, run the same command without --plan[/green]")


def render_next_steps(console: Console) -> None:
    console.print("\n[blue]Next steps:[/blue]")
    console.print("  [dim]- Review generated files[/dim]")
    console.print("  [dim]- Run: cloudship --ship (to deploy)[/dim]")
    console.print("  [dim]- Or run: npm run deploy[/dim]\n")
