"""Ship workflow using Pydantic Graph.

Scaffold -> Install -> GenerateTypes -> Deploy. Install and Deploy failures
end the run; a type generation failure is only a warning. A failed ship
never undoes the scaffold.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, Graph, GraphRunContext

from cloudship.activities import deploy
from cloudship.detectors import get_project_type
from cloudship.detectors.base import ProjectType
from cloudship.exceptions import ExternalStepError, UsageError
from cloudship.workflows.state import Severity, ShipOutcome, ShipState, Step

Ctx = GraphRunContext[ShipState, None]


def _project_type(state: ShipState) -> ProjectType:
    project_type = get_project_type(state.detection.type_id)
    if project_type is None:
        raise UsageError(f"Unsupported project type '{state.detection.type_id}'")
    return project_type


def _failed(state: ShipState, step: Step) -> End[ShipOutcome]:
    return End(ShipOutcome(scaffold=state.scaffold_result, failed_step=step))


@dataclass
class Scaffold(BaseNode[ShipState]):
    """Create or merge project files."""

    async def run(self, ctx: Ctx) -> Install | End[ShipOutcome]:
        progress = ctx.state.on_progress
        project_type = _project_type(ctx.state)

        progress(Severity.INFO, f"Preparing {project_type.display_name} project...")
        result = await project_type.scaffold(
            ctx.state.detection,
            ctx.state.overrides,
            ctx.state.path,
            ctx.state.choose,
            progress,
        )
        ctx.state.scaffold_result = result

        if result is None:
            return End(ShipOutcome())

        progress(Severity.SUCCESS, "Project preparation completed")
        if not ctx.state.ship:
            return End(ShipOutcome(scaffold=result))
        return Install()


@dataclass
class Install(BaseNode[ShipState]):
    """Install dependencies. Fatal on failure."""

    async def run(self, ctx: Ctx) -> GenerateTypes | End[ShipOutcome]:
        progress = ctx.state.on_progress
        command = _project_type(ctx.state).step_command(Step.INSTALL)

        progress(Severity.INFO, "Installing dependencies...")
        try:
            await deploy.require_step(Step.INSTALL, command, ctx.state.path)
        except ExternalStepError as e:
            progress(Severity.ERROR, f"Failed to install dependencies (exit code {e.exit_code})")
            return _failed(ctx.state, Step.INSTALL)

        progress(Severity.SUCCESS, "Dependencies installed")
        return GenerateTypes()


@dataclass
class GenerateTypes(BaseNode[ShipState]):
    """Generate type declarations. Best effort."""

    async def run(self, ctx: Ctx) -> Deploy:
        progress = ctx.state.on_progress
        command = _project_type(ctx.state).step_command(Step.TYPES)

        progress(Severity.INFO, "Generating TypeScript types...")
        exit_code = await deploy.run_step(Step.TYPES, command, ctx.state.path)
        if exit_code == 0:
            ctx.state.types_generated = True
            progress(Severity.SUCCESS, "TypeScript types generated")
        else:
            progress(Severity.WARNING, f"Type generation failed (exit code {exit_code}), continuing")

        return Deploy()


@dataclass
class Deploy(BaseNode[ShipState]):
    """Deploy to the cloud. Fatal on failure."""

    async def run(self, ctx: Ctx) -> End[ShipOutcome]:
        progress = ctx.state.on_progress
        command = _project_type(ctx.state).step_command(Step.DEPLOY)

        progress(Severity.INFO, "Deploying...")
        try:
            await deploy.require_step(Step.DEPLOY, command, ctx.state.path)
        except ExternalStepError as e:
            progress(Severity.ERROR, f"Deployment failed (exit code {e.exit_code})")
            return _failed(ctx.state, Step.DEPLOY)

        progress(Severity.SUCCESS, "Deployment completed")
        return End(ShipOutcome(scaffold=ctx.state.scaffold_result, shipped=True))


ship_graph = Graph(
    nodes=[Scaffold, Install, GenerateTypes, Deploy],
    state_type=ShipState,
    run_end_type=ShipOutcome,
)
