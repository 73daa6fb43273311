"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from cloudship.models.detection import DetectionResult, ProjectOverrides
from cloudship.settings import Settings
from cloudship.workflows.state import Severity


@pytest.fixture
def settings() -> Settings:
    """Default settings, isolated from the environment."""
    return Settings(_env_file=None)


@pytest.fixture
def overrides() -> ProjectOverrides:
    """Non-interactive overrides with no explicit names."""
    return ProjectOverrides(no_prompt=True)


@pytest.fixture
def image_detection() -> DetectionResult:
    """Detection for a bare image argument."""
    return DetectionResult(
        type_id="container",
        display_name="Container",
        confidence=0.95,
        indicators=["Explicit image reference: nginx:alpine"],
        metadata={"image": "nginx:alpine", "source_file_path": None},
    )


@pytest.fixture
def dockerfile_project(tmp_path: Path) -> Path:
    """Project directory with a Dockerfile exposing port 9000."""
    (tmp_path / "Dockerfile").write_text("FROM node:20-slim\nWORKDIR /app\nEXPOSE 9000\n")
    return tmp_path


@pytest.fixture
def dockerfile_detection(dockerfile_project: Path) -> DetectionResult:
    """Detection for a directory with a Dockerfile."""
    return DetectionResult(
        type_id="container",
        display_name="Container",
        confidence=0.9,
        indicators=["Found Dockerfile"],
        metadata={"image": None, "source_file_path": str(dockerfile_project / "Dockerfile")},
    )


@pytest.fixture
def progress_messages() -> list[tuple[Severity, str]]:
    return []


@pytest.fixture
def on_progress(progress_messages):
    """Progress callback that records every message."""

    def callback(severity: Severity, message: str) -> None:
        progress_messages.append((severity, message))

    return callback


@pytest.fixture
def descriptor_with_full_batch() -> str:
    """wrangler.jsonc content whose only migration already holds three classes."""
    classes = ["AlphaContainer", "BetaContainer", "GammaContainer"]
    document = {
        "name": "existing",
        "main": "src/index.ts",
        "compatibility_date": "2025-01-01",
        "compatibility_flags": ["nodejs_compat"],
        "containers": [
            {"class_name": name, "image": f"./{name}.Dockerfile", "max_instances": 10}
            for name in classes
        ],
        "durable_objects": {
            "bindings": [{"class_name": name, "name": name.upper()} for name in classes]
        },
        "migrations": [{"new_sqlite_classes": classes, "tag": "v1"}],
    }
    return "// Managed by hand\n" + json.dumps(document, indent=2) + "\n"
