"""Models for scaffold planning and results."""

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel

from cloudship.models.descriptor import DeploymentDescriptor


class FileOperation(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    SKIP = "skip"


class FileAction(BaseModel):
    """A single planned filesystem change."""

    path: Path
    operation: FileOperation
    content: str | None = None
    reason: str = ""


class ScaffoldPlan(BaseModel):
    """Complete in-memory outcome of a scaffold, computed before any write."""

    cwd: Path
    project_name: str
    class_name: str
    binding_name: str
    source_ref: str
    port: int
    descriptor: DeploymentDescriptor
    actions: list[FileAction] = []

    def changes(self) -> list[FileAction]:
        return [a for a in self.actions if a.operation != FileOperation.SKIP]


class ScaffoldResult(BaseModel):
    """What a successful scaffold produced."""

    project_name: str
    class_name: str
    binding_name: str
    files: list[str] = []
