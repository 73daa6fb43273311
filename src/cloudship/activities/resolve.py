"""Detection resolution activity."""

import logging
from collections.abc import Sequence

from cloudship.detectors.base import ProjectType
from cloudship.exceptions import UsageError
from cloudship.models.detection import DetectionResult, Evidence, ProjectOverrides
from cloudship.workflows.state import ChooseCallback, Option

logger = logging.getLogger(__name__)

# Top two confidences closer than this are a near-tie
NEAR_TIE_MARGIN = 0.1

CHOICE_QUESTION = "Multiple project types detected. Which would you like to use?"


def _label(result: DetectionResult) -> str:
    return f"{result.display_name} (confidence: {round(result.confidence * 100)}%)"


def rank(
    project_types: Sequence[ProjectType],
    evidence: Evidence,
    overrides: ProjectOverrides,
) -> list[DetectionResult]:
    """Run every detector and sort results by confidence, highest first.

    The sort is stable, so registration order breaks exact ties.
    """
    results = []
    for project_type in project_types:
        result = project_type.detect(evidence, overrides)
        if result is not None:
            logger.debug("%s: %.2f", result.type_id, result.confidence)
            results.append(result)
    return sorted(results, key=lambda r: r.confidence, reverse=True)


def resolve(
    project_types: Sequence[ProjectType],
    evidence: Evidence,
    overrides: ProjectOverrides,
    choose: ChooseCallback,
) -> DetectionResult | None:
    """Pick a single detection result.

    A clear winner (lead of at least NEAR_TIE_MARGIN) is returned directly.
    Near-ties are handed to the choose callback with candidates in rank
    order; the non-interactive chooser takes the top-ranked one.

    Returns:
        The chosen result, or None when no detector fired.
    """
    results = rank(project_types, evidence, overrides)
    if not results:
        return None

    top = results[0]
    if len(results) == 1 or top.confidence - results[1].confidence >= NEAR_TIE_MARGIN:
        return top

    candidates = [r for r in results if top.confidence - r.confidence < NEAR_TIE_MARGIN]
    logger.info("Near-tie between %s", ", ".join(r.type_id for r in candidates))
    return choose(CHOICE_QUESTION, [Option(label=_label(r), value=r) for r in candidates])


def detect_project(
    project_types: Sequence[ProjectType],
    evidence: Evidence,
    overrides: ProjectOverrides,
    choose: ChooseCallback,
) -> DetectionResult:
    """Detect the project type, honoring a forced type id.

    Raises:
        UsageError: If the forced type is not registered, or nothing matched.
    """
    if overrides.type_id:
        forced = next((p for p in project_types if p.id == overrides.type_id), None)
        if forced is None:
            supported = ", ".join(p.id for p in project_types)
            raise UsageError(f"Unsupported project type '{overrides.type_id}' (supported: {supported})")
        result = forced.detect(evidence, overrides)
        if result is None:
            raise UsageError(f"No {forced.display_name.lower()} project detected")
        return result

    result = resolve(project_types, evidence, overrides, choose)
    if result is None:
        raise UsageError("No supported project type detected")
    return result
