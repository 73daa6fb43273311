"""Project, class and binding name derivation."""

import re
from collections.abc import Iterable
from pathlib import Path

CLASS_SUFFIX = "Container"
BINDING_SUFFIX = "_CONTAINER"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9-]")
_WORD_SPLIT = re.compile(r"[^a-zA-Z0-9]+")


def sanitize(name: str) -> str:
    """Replace anything outside [A-Za-z0-9-] with a dash."""
    return _UNSAFE_CHARS.sub("-", name)


def name_from_image(image: str) -> str:
    """Derive a project name from an image reference.

    ``ghcr.io/acme/web-api:1.2@sha256:...`` becomes ``web-api``.
    """
    reference = image.split("@", 1)[0]
    last_segment = reference.rstrip("/").rsplit("/", 1)[-1]
    return sanitize(last_segment.split(":", 1)[0])


def resolve_project_name(override: str | None, image: str | None, cwd: Path) -> str:
    """Explicit override, then image-derived name, then directory name."""
    if override:
        return override
    if image:
        derived = name_from_image(image)
        if derived.strip("-"):
            return derived
    return sanitize(cwd.resolve().name)


def class_base_name(project_name: str) -> str:
    """CamelCase the project name and append the class suffix.

    >>> class_base_name("my-web-app")
    'MyWebAppContainer'
    """
    words = [w for w in _WORD_SPLIT.split(project_name) if w]
    camel = "".join(w[0].upper() + w[1:] for w in words) or "App"
    if camel[0].isdigit():
        camel = f"App{camel}"
    return f"{camel}{CLASS_SUFFIX}"


def unique_class_name(base_name: str, taken: Iterable[str]) -> str:
    """Append 1, 2, ... to base_name until it collides with nothing in taken."""
    taken = set(taken)
    class_name = base_name
    counter = 1
    while class_name in taken:
        class_name = f"{base_name}{counter}"
        counter += 1
    return class_name


def binding_name(class_name: str) -> str:
    """Binding name for a class: ``NginxContainer`` -> ``NGINX_CONTAINER``."""
    return class_name.upper().replace(CLASS_SUFFIX.upper(), "", 1) + BINDING_SUFFIX
