"""Evidence gathering activity.

Looks for indicator files in the working directory and records raw facts.
No scoring happens here; detectors interpret the evidence.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

import aiofiles

from cloudship.models.detection import Evidence

logger = logging.getLogger(__name__)

ENV_FILE = ".env"


def parse_env(content: str) -> dict[str, str]:
    """Parse KEY=value lines. Blank lines and # comments are skipped.

    The first assignment of a key wins. Values are kept raw (quotes
    included); callers strip what they need.
    """
    env: dict[str, str] = {}
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, _, value = stripped.partition("=")
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export ") :].strip()
        if key:
            env.setdefault(key, value.strip())
    return env


async def _read_env(path: Path) -> dict[str, str]:
    try:
        async with aiofiles.open(path) as f:
            content = await f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return {}
    return parse_env(content)


async def scan(cwd: Path, args: list[str], indicator_names: Iterable[str]) -> Evidence:
    """Gather evidence from cwd for the given indicator names.

    Args:
        cwd: Working directory to inspect.
        args: Positional command-line arguments; the first one is the target.
        indicator_names: File or directory names the registered detectors care about.

    Returns:
        Evidence with the names found, the target and parsed .env values.
    """
    present = frozenset(name for name in indicator_names if (cwd / name).exists())
    logger.debug("Indicators present in %s: %s", cwd, sorted(present))

    env: dict[str, str] = {}
    if ENV_FILE in present and (cwd / ENV_FILE).is_file():
        env = await _read_env(cwd / ENV_FILE)

    return Evidence(
        cwd=cwd,
        target=args[0] if args else None,
        present=present,
        env=env,
    )
