"""Pydantic models for cloudship."""

from cloudship.models.descriptor import (
    Binding,
    ContainerResource,
    DeploymentDescriptor,
    DurableObjects,
    Migration,
)
from cloudship.models.detection import DetectionResult, Evidence, ProjectOverrides
from cloudship.models.scaffold import FileAction, FileOperation, ScaffoldPlan, ScaffoldResult

__all__ = [
    "Binding",
    "ContainerResource",
    "DeploymentDescriptor",
    "DetectionResult",
    "DurableObjects",
    "Evidence",
    "FileAction",
    "FileOperation",
    "Migration",
    "ProjectOverrides",
    "ScaffoldPlan",
    "ScaffoldResult",
]
