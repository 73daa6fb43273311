"""Deployment descriptor (wrangler.jsonc) serialization.

Parsing is permissive: comments and trailing commas are accepted. A leading
``//`` comment block survives a rewrite; comments inside the body do not.
"""

import json

import json5
from pydantic import ValidationError

from cloudship.exceptions import ConfigError
from cloudship.models.descriptor import DeploymentDescriptor

DESCRIPTOR_FILE = "wrangler.jsonc"


def _split_header(content: str) -> tuple[str, str]:
    """Split off the leading run of ``//`` comment and blank lines."""
    lines = content.splitlines(keepends=True)
    count = 0
    for line in lines:
        stripped = line.strip()
        if stripped and not stripped.startswith("//"):
            break
        count += 1
    header = "".join(lines[:count]).strip("\n")
    return (f"{header}\n" if header else ""), "".join(lines[count:])


def parse_descriptor(content: str) -> DeploymentDescriptor:
    """Parse JSON-with-comments into a DeploymentDescriptor.

    Raises:
        ConfigError: If the content is not a valid descriptor.
    """
    header, body = _split_header(content)
    try:
        document = json5.loads(body)
    except ValueError as e:
        raise ConfigError(f"Malformed {DESCRIPTOR_FILE}: {e}") from e

    if not isinstance(document, dict):
        raise ConfigError(f"Malformed {DESCRIPTOR_FILE}: top level must be an object")

    try:
        return DeploymentDescriptor.from_document(document, header=header)
    except ValidationError as e:
        raise ConfigError(f"Invalid {DESCRIPTOR_FILE}: {e}") from e


def render_descriptor(descriptor: DeploymentDescriptor) -> str:
    """Serialize a descriptor, keeping its leading comment block."""
    body = json.dumps(descriptor.to_document(), indent=2, ensure_ascii=False)
    return f"{descriptor.header}{body}\n"
