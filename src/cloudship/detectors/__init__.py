"""Registry of supported project types.

Registration order breaks exact confidence ties during resolution.
"""

from cloudship.detectors.base import ProjectType
from cloudship.detectors.container import ContainerProjectType

PROJECT_TYPES: tuple[ProjectType, ...] = (ContainerProjectType(),)


def get_project_type(
    type_id: str,
    project_types: tuple[ProjectType, ...] = PROJECT_TYPES,
) -> ProjectType | None:
    """Look up a registered project type by id."""
    for project_type in project_types:
        if project_type.id == type_id:
            return project_type
    return None


def indicator_names(project_types: tuple[ProjectType, ...] = PROJECT_TYPES) -> list[str]:
    """Union of indicator names across project types, first-seen order."""
    names: dict[str, None] = {}
    for project_type in project_types:
        names.update(dict.fromkeys(project_type.indicator_names))
    return list(names)


__all__ = [
    "PROJECT_TYPES",
    "ContainerProjectType",
    "ProjectType",
    "get_project_type",
    "indicator_names",
]
