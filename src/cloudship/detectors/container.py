"""Container project type: Dockerfiles, compose files and image references."""

import logging
from pathlib import Path, PurePosixPath

from cloudship.activities import scaffold as scaffold_activity
from cloudship.detectors.base import ProjectType
from cloudship.models.detection import DetectionResult, Evidence, ProjectOverrides
from cloudship.models.scaffold import ScaffoldPlan, ScaffoldResult
from cloudship.settings import get_settings
from cloudship.workflows.state import ChooseCallback, ProgressCallback, Step

logger = logging.getLogger(__name__)

BUILD_DESCRIPTORS = ("Dockerfile", "Containerfile", "dockerfile")
COMPOSE_FILES = ("docker-compose.yml", "docker-compose.yaml", "compose.yml", "compose.yaml")
MARKER_DIR = ".docker"
ENV_FILE = ".env"
MANIFEST_FILE = "manifest.json"

IMAGE_ARGUMENT_CONFIDENCE = 0.95
BUILD_DESCRIPTOR_CONFIDENCE = 0.9
MANIFEST_CONFIDENCE = 0.85
ENV_IMAGE_CONFIDENCE = 0.8
COMPOSE_CONFIDENCE = 0.7
MARKER_CONFIDENCE = 0.6


def is_image_reference(target: str, cwd: Path) -> bool:
    """True if target looks like ``name:tag`` or ``namespace/name``.

    The extension check ignores the tag, so ``nginx:1.25`` still counts while
    ``images/app.tar`` does not. Paths that exist locally are never images.
    """
    if ":" not in target and "/" not in target:
        return False
    last_segment = target.rstrip("/").rsplit("/", 1)[-1]
    name = last_segment.split("@", 1)[0].split(":", 1)[0]
    if PurePosixPath(name).suffix:
        return False
    return not (cwd / target).exists()


def _strip_quotes(value: str) -> str:
    return value.strip().replace('"', "").replace("'", "")


class ContainerProjectType(ProjectType):
    """Anything that can be described by a container image."""

    id = "container"
    display_name = "Container"
    indicator_names = (
        *BUILD_DESCRIPTORS,
        *COMPOSE_FILES,
        MARKER_DIR,
        ENV_FILE,
        MANIFEST_FILE,
    )

    def detect(self, evidence: Evidence, overrides: ProjectOverrides) -> DetectionResult | None:
        build_descriptor = evidence.first_present(BUILD_DESCRIPTORS)
        source_file_path = str(evidence.path(build_descriptor)) if build_descriptor else None

        target = evidence.target
        if target and is_image_reference(target, evidence.cwd):
            # A local build descriptor still wins over the image when scaffolding
            return self._result(
                IMAGE_ARGUMENT_CONFIDENCE,
                [f"Explicit image reference: {target}"],
                {"image": target, "source_file_path": source_file_path},
            )

        indicators: list[str] = []
        confidence = 0.0
        image: str | None = None

        if build_descriptor:
            indicators.append(f"Found {build_descriptor}")
            confidence = max(confidence, BUILD_DESCRIPTOR_CONFIDENCE)

        compose_file = evidence.first_present(COMPOSE_FILES)
        if compose_file:
            indicators.append(f"Found {compose_file}")
            confidence = max(confidence, COMPOSE_CONFIDENCE)

        if evidence.has(MARKER_DIR):
            indicators.append(f"Found {MARKER_DIR} directory")
            confidence = max(confidence, MARKER_CONFIDENCE)

        env_image = _strip_quotes(evidence.env.get("IMAGE", ""))
        if env_image:
            image = env_image
            indicators.append(f"Found IMAGE in {ENV_FILE}: {image}")
            confidence = max(confidence, ENV_IMAGE_CONFIDENCE)

        if evidence.has(MANIFEST_FILE):
            indicators.append(f"Found OCI {MANIFEST_FILE}")
            confidence = max(confidence, MANIFEST_CONFIDENCE)

        logger.debug("Container confidence %.2f from %d indicator(s)", confidence, len(indicators))
        return self._result(
            confidence,
            indicators,
            {"image": image, "source_file_path": source_file_path},
        )

    async def plan(
        self,
        detection: DetectionResult,
        overrides: ProjectOverrides,
        cwd: Path,
        choose: ChooseCallback,
    ) -> ScaffoldPlan | None:
        return await scaffold_activity.plan_scaffold(detection, overrides, cwd, choose)

    async def scaffold(
        self,
        detection: DetectionResult,
        overrides: ProjectOverrides,
        cwd: Path,
        choose: ChooseCallback,
        on_progress: ProgressCallback,
    ) -> ScaffoldResult | None:
        return await scaffold_activity.scaffold(detection, overrides, cwd, choose, on_progress)

    def step_command(self, step: Step) -> list[str]:
        package_manager = get_settings().package_manager
        commands = {
            Step.INSTALL: [package_manager, "install"],
            Step.TYPES: ["npx", "wrangler", "types"],
            Step.DEPLOY: ["npx", "wrangler", "deploy"],
        }
        return commands[step]
