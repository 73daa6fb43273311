"""Models for evidence gathering and project type detection."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class Evidence:
    """Raw facts gathered from the working directory before any scoring."""

    cwd: Path
    target: str | None = None
    present: frozenset[str] = frozenset()
    env: dict[str, str] = field(default_factory=dict)

    def has(self, name: str) -> bool:
        return name in self.present

    def first_present(self, names: Iterable[str]) -> str | None:
        """Return the first of names found in cwd, in the given order."""
        for name in names:
            if name in self.present:
                return name
        return None

    def path(self, name: str) -> Path:
        return self.cwd / name


class DetectionResult(BaseModel):
    """A project type's claim on the working directory."""

    type_id: str
    display_name: str
    confidence: float = Field(ge=0.0, le=1.0)
    indicators: list[str] = []  # evaluation order, rendered as-is
    metadata: dict[str, str | None] = {}


class ProjectOverrides(BaseModel):
    """User-supplied knobs for a single invocation."""

    type_id: str | None = None
    name: str | None = None
    class_name: str | None = None
    max_instances: int = 10
    migration_tag: str | None = None
    force: bool = False
    no_prompt: bool = False
