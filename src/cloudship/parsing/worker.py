"""Worker source (src/index.ts) inspection and editing."""

import re

_EXPORTED_CLASS = re.compile(r"export\s+class\s+(\w+)")


def exported_classes(code: str) -> list[str]:
    return _EXPORTED_CLASS.findall(code)


def defines_class(code: str, class_name: str) -> bool:
    return class_name in exported_classes(code)


def _is_preamble(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("import ") or stripped.startswith("//")


def insert_class(code: str, class_block: str) -> str:
    """Insert class_block after the leading imports, comments and blank lines."""
    lines = code.split("\n")
    insert_at = 0
    for i, line in enumerate(lines):
        if not _is_preamble(line):
            break
        insert_at = i + 1

    before = lines[:insert_at]
    separator = [""] if before and before[-1].strip() else []
    block = class_block.rstrip("\n")
    return "\n".join([*before, *separator, block, "", *lines[insert_at:]])
