"""State for the ship workflow."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

from cloudship.models.detection import DetectionResult, ProjectOverrides
from cloudship.models.scaffold import ScaffoldResult


class Step(StrEnum):
    """External steps run when shipping."""

    INSTALL = "install"
    TYPES = "types"
    DEPLOY = "deploy"


class Severity(StrEnum):
    """Severity levels for progress messages."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Option:
    """A labeled choice offered to the user."""

    label: str
    value: Any


# Callback signatures
ProgressCallback = Callable[[Severity, str], None]
ChooseCallback = Callable[[str, Sequence[Option]], Any]  # (question, options) -> option value


def _noop_progress(severity: Severity, message: str) -> None:
    """Default no-op progress callback."""


def first_option(label: str, options: Sequence[Option]) -> Any:
    """Non-interactive chooser: always picks the first option."""
    if not options:
        raise ValueError(f"No options to choose from: {label}")
    return options[0].value


@dataclass
class ShipOutcome:
    """How far the ship workflow got."""

    scaffold: ScaffoldResult | None = None
    shipped: bool = False
    failed_step: Step | None = None

    @property
    def declined(self) -> bool:
        return self.scaffold is None


@dataclass
class ShipState:
    """Shared state for the ship workflow."""

    path: Path
    detection: DetectionResult
    overrides: ProjectOverrides = field(default_factory=ProjectOverrides)
    ship: bool = False

    # Callbacks for UI interaction (CLI provides Rich-based implementations)
    on_progress: ProgressCallback = _noop_progress
    choose: ChooseCallback = first_option

    # Set by the Scaffold node
    scaffold_result: ScaffoldResult | None = None
    types_generated: bool = False
