"""Small async file helpers."""

from pathlib import Path

import aiofiles


async def read_text(path: Path) -> str | None:
    """Read a text file. Returns None if it does not exist."""
    if not path.is_file():
        return None
    async with aiofiles.open(path) as f:
        return await f.read()


async def write_atomic(path: Path, content: str) -> None:
    """Write content so readers see either the old or the new file, never a mix."""
    path.parent.mkdir(parents=True, exist_ok=True)

    # Write to temp file first for atomic operation
    temp_path = path.with_name(f".{path.name}.tmp")
    try:
        async with aiofiles.open(temp_path, "w") as f:
            await f.write(content)
        temp_path.replace(path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
