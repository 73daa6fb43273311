"""Dependency manifest (package.json) handling."""

import json
from typing import Any

MANIFEST_FILE = "package.json"
MERGED_SECTIONS = ("dependencies", "devDependencies", "scripts")


def merge_manifest(existing: dict[str, Any], required: dict[str, Any]) -> dict[str, Any]:
    """Merge required dependency and script maps into an existing manifest.

    Required entries win on key collisions. Other keys are left alone.
    """
    merged = dict(existing)
    for section in MERGED_SECTIONS:
        current = existing.get(section)
        merged[section] = {**(current if isinstance(current, dict) else {}), **required.get(section, {})}
    return merged


def parse_manifest(content: str) -> dict[str, Any]:
    """Parse package.json content.

    Raises:
        ValueError: If the content is not a JSON object.
    """
    document = json.loads(content)
    if not isinstance(document, dict):
        raise ValueError("top level must be an object")
    return document


def render_json(document: dict[str, Any]) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
