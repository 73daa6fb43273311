"""Dockerfile inspection."""

import re

DEFAULT_PORT = 8080

_LEADING_DIGITS = re.compile(r"\d+")


def exposed_port(content: str, default: int = DEFAULT_PORT) -> int:
    """Port from the first usable EXPOSE directive.

    The keyword is case-insensitive; the first token after it must start
    with digits (``9000`` and ``9000/tcp`` both work). Directives whose
    token does not parse, such as ``EXPOSE $PORT``, are skipped.
    """
    for line in content.splitlines():
        tokens = line.split()
        if len(tokens) < 2 or tokens[0].upper() != "EXPOSE":
            continue
        match = _LEADING_DIGITS.match(tokens[1])
        if match:
            return int(match.group())
    return default
