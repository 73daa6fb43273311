"""Capability interface every supported project type implements."""

from abc import ABC, abstractmethod
from pathlib import Path

from cloudship.models.detection import DetectionResult, Evidence, ProjectOverrides
from cloudship.models.scaffold import ScaffoldPlan, ScaffoldResult
from cloudship.workflows.state import ChooseCallback, ProgressCallback, Step


class ProjectType(ABC):
    """A deployable project type: detect it, scaffold it, ship it."""

    id: str
    display_name: str
    # Files and directories the evidence scanner should look for
    indicator_names: tuple[str, ...] = ()

    @abstractmethod
    def detect(self, evidence: Evidence, overrides: ProjectOverrides) -> DetectionResult | None:
        """Score the evidence. Returns None when no signal fired."""

    @abstractmethod
    async def plan(
        self,
        detection: DetectionResult,
        overrides: ProjectOverrides,
        cwd: Path,
        choose: ChooseCallback,
    ) -> ScaffoldPlan | None:
        """Compute every file change without touching disk. None if declined."""

    @abstractmethod
    async def scaffold(
        self,
        detection: DetectionResult,
        overrides: ProjectOverrides,
        cwd: Path,
        choose: ChooseCallback,
        on_progress: ProgressCallback,
    ) -> ScaffoldResult | None:
        """Create or merge project files. None if the user declined."""

    @abstractmethod
    def step_command(self, step: Step) -> list[str]:
        """Command line for an external ship step."""

    def _result(
        self,
        confidence: float,
        indicators: list[str],
        metadata: dict[str, str | None],
    ) -> DetectionResult | None:
        if confidence <= 0:
            return None
        return DetectionResult(
            type_id=self.id,
            display_name=self.display_name,
            confidence=confidence,
            indicators=indicators,
            metadata=metadata,
        )
