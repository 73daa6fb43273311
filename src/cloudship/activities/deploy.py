"""External ship steps: dependency install, type generation, deploy.

Each step is an opaque subprocess with inherited stdio so the user sees
the tool's own output. No retries, no timeouts.
"""

import asyncio
import logging
from pathlib import Path

from cloudship.exceptions import ExternalStepError

logger = logging.getLogger(__name__)

# Exit code reported when the executable itself is missing, as shells do
COMMAND_NOT_FOUND = 127


async def run_step(name: str, args: list[str], cwd: Path) -> int:
    """Run one external step to completion.

    Args:
        name: Step name for logging.
        args: Command line.
        cwd: Directory to run in.

    Returns:
        The process exit code.
    """
    logger.debug("[%s] %s (cwd=%s)", name, " ".join(args), cwd)
    try:
        process = await asyncio.create_subprocess_exec(*args, cwd=str(cwd))
    except FileNotFoundError:
        logger.error("[%s] command not found: %s", name, args[0])
        return COMMAND_NOT_FOUND

    return await process.wait()


async def require_step(name: str, args: list[str], cwd: Path) -> None:
    """Run a step that must succeed.

    Raises:
        ExternalStepError: If the step exits non-zero.
    """
    exit_code = await run_step(name, args, cwd)
    if exit_code != 0:
        raise ExternalStepError(name, exit_code)
