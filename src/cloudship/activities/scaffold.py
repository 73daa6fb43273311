"""Container project scaffolding activity.

Scaffolding runs in two phases. ``plan_scaffold`` reads the workspace,
resolves names, merges the descriptor and renders every file in memory.
``apply_plan`` then only writes. A merge or parse failure therefore never
leaves a half-updated project behind.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from pydantic import ValidationError

from cloudship import naming
from cloudship.activities.merge import merge_descriptor
from cloudship.exceptions import ConfigError, UsageError
from cloudship.models.descriptor import DeploymentDescriptor
from cloudship.models.detection import DetectionResult, ProjectOverrides
from cloudship.models.scaffold import FileAction, FileOperation, ScaffoldPlan, ScaffoldResult
from cloudship.parsing import defines_class, exported_classes, exposed_port, insert_class
from cloudship.settings import Settings, get_settings
from cloudship.storage.descriptor import DESCRIPTOR_FILE, parse_descriptor, render_descriptor
from cloudship.storage.files import read_text, write_atomic
from cloudship.storage.manifest import MANIFEST_FILE, merge_manifest, parse_manifest, render_json
from cloudship.templates import worker as templates
from cloudship.workflows.state import ChooseCallback, Option, ProgressCallback, Severity

logger = logging.getLogger(__name__)

WORKER_FILE = "src/index.ts"
GENERATED_DOCKERFILE = "Dockerfile.generated"
TSCONFIG_FILE = "tsconfig.json"
IGNORE_FILE = ".cfignore"
DEPENDENCY_CACHE = "node_modules"

CONFIRM_QUESTION = "This will modify existing project files. Continue?"


@dataclass
class Workspace:
    """Project files as they were before this scaffold touched anything."""

    cwd: Path
    worker: str | None
    descriptor: DeploymentDescriptor | None
    descriptor_content: str | None
    manifest: str | None
    has_dependency_cache: bool

    @property
    def established(self) -> bool:
        """Looks like a project someone has been working on already."""
        return (self.worker is not None and self.manifest is not None) or self.has_dependency_cache

    def taken_class_names(self) -> set[str]:
        names = set(exported_classes(self.worker or ""))
        if self.descriptor is not None:
            names.update(self.descriptor.class_names())
        return names


async def _read(path: Path) -> str | None:
    try:
        return await read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read {path}: {e}") from e


def _is_populated(path: Path) -> bool:
    return path.is_dir() and any(path.iterdir())


async def snapshot(cwd: Path) -> Workspace:
    """Read every file the scaffold may merge into.

    Raises:
        ConfigError: If an existing file cannot be read or the descriptor is malformed.
    """
    descriptor_content = await _read(cwd / DESCRIPTOR_FILE)
    descriptor = parse_descriptor(descriptor_content) if descriptor_content is not None else None
    return Workspace(
        cwd=cwd,
        worker=await _read(cwd / WORKER_FILE),
        descriptor=descriptor,
        descriptor_content=descriptor_content,
        manifest=await _read(cwd / MANIFEST_FILE),
        has_dependency_cache=_is_populated(cwd / DEPENDENCY_CACHE),
    )


def source_ref_for(detection: DetectionResult, cwd: Path) -> str:
    """Build descriptor reference the resource will point at.

    Raises:
        UsageError: If there is neither a build descriptor nor an image.
    """
    source_file_path = detection.metadata.get("source_file_path")
    if source_file_path:
        ref = Path(os.path.relpath(source_file_path, cwd)).as_posix()
        return ref if ref.startswith(("./", "../")) else f"./{ref}"

    if detection.metadata.get("image"):
        return f"./{GENERATED_DOCKERFILE}"

    raise UsageError(
        "Nothing to deploy: no Dockerfile found and no image reference given "
        "(pass an image, e.g. `cloudship nginx:alpine`)"
    )


def _same_source(a: str | None, b: str) -> bool:
    return a is not None and PurePosixPath(a) == PurePosixPath(b)


def resolve_class_name(
    workspace: Workspace,
    override: str | None,
    project_name: str,
    source_ref: str,
) -> str:
    """Reuse the class already deployed from this source, else pick a new one."""
    if workspace.descriptor is not None:
        for resource in workspace.descriptor.resources or []:
            if _same_source(resource.source_ref, source_ref):
                logger.info("Found existing container for this source: %s", resource.class_name)
                return resource.class_name

    if override:
        return override

    base_name = naming.class_base_name(project_name)
    return naming.unique_class_name(base_name, workspace.taken_class_names())


def _action(path: Path, content: str, existing: str | None, reason: str = "") -> FileAction:
    if existing is None:
        return FileAction(path=path, operation=FileOperation.CREATE, content=content, reason=reason)
    if existing == content:
        return FileAction(path=path, operation=FileOperation.SKIP, reason="unchanged")
    return FileAction(path=path, operation=FileOperation.UPDATE, content=content, reason=reason)


def _skip(path: Path, reason: str) -> FileAction:
    return FileAction(path=path, operation=FileOperation.SKIP, reason=reason)


async def _detect_port(source_file_path: str, default: int) -> int:
    try:
        content = await read_text(Path(source_file_path))
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not analyze %s: %s", source_file_path, e)
        return default
    if content is None:
        return default
    return exposed_port(content, default)


def _plan_worker(workspace: Workspace, class_name: str, binding: str, port: int) -> FileAction:
    path = workspace.cwd / WORKER_FILE
    if workspace.worker is None:
        return _action(path, templates.render_worker(class_name, binding, port), None)
    if defines_class(workspace.worker, class_name):
        return _skip(path, f"class {class_name} already exists")
    block = templates.render_container_class(class_name, port)
    return _action(path, insert_class(workspace.worker, block), workspace.worker)


def _plan_manifest(workspace: Workspace, project_name: str) -> FileAction:
    path = workspace.cwd / MANIFEST_FILE
    required = templates.package_manifest(project_name)
    if workspace.manifest is None:
        return _action(path, render_json(required), None)

    try:
        existing = parse_manifest(workspace.manifest)
    except ValueError as e:
        logger.warning("Failed to merge %s: %s", MANIFEST_FILE, e)
        return _skip(path, f"malformed: {e}")

    merged = merge_manifest(existing, required)
    if merged == existing:
        return _skip(path, "dependencies already present")
    return _action(path, render_json(merged), workspace.manifest)


def _plan_if_absent(path: Path, content: str) -> FileAction:
    if path.exists():
        return _skip(path, "already exists")
    return _action(path, content, None)


async def plan_scaffold(
    detection: DetectionResult,
    overrides: ProjectOverrides,
    cwd: Path,
    choose: ChooseCallback,
    settings: Settings | None = None,
) -> ScaffoldPlan | None:
    """Work out every file change for scaffolding cwd, without writing.

    Args:
        detection: The resolved detection result.
        overrides: User-supplied knobs for this invocation.
        cwd: Project directory.
        choose: Capability used for the overwrite confirmation.
        settings: Settings to use; defaults to the cached application settings.

    Returns:
        The plan, or None if the user declined to modify existing files.

    Raises:
        ConfigError: If existing files cannot be read or merged.
        UsageError: If there is nothing deployable.
    """
    settings = settings or get_settings()
    workspace = await snapshot(cwd)

    image = detection.metadata.get("image")
    source_file_path = detection.metadata.get("source_file_path")
    project_name = naming.resolve_project_name(overrides.name, image, cwd)
    source_ref = source_ref_for(detection, cwd)
    class_name = resolve_class_name(workspace, overrides.class_name, project_name, source_ref)
    binding = naming.binding_name(class_name)

    if (workspace.worker is not None or workspace.descriptor is not None) and not overrides.force:
        proceed = choose(CONFIRM_QUESTION, [Option("Continue", True), Option("Cancel", False)])
        if not proceed:
            logger.info("Operation cancelled")
            return None

    actions: list[FileAction] = []

    if source_file_path:
        port = await _detect_port(source_file_path, settings.default_port)
    else:
        port = settings.default_port
        generated = cwd / GENERATED_DOCKERFILE
        content = templates.render_generated_dockerfile(image, port)
        actions.append(_action(generated, content, await _read(generated)))

    actions.append(_plan_worker(workspace, class_name, binding, port))

    descriptor = workspace.descriptor
    if descriptor is None:
        descriptor = DeploymentDescriptor.from_document(
            templates.descriptor_document(project_name, settings.compatibility_flag, WORKER_FILE)
        )
    try:
        merge_descriptor(
            descriptor,
            class_name=class_name,
            binding_name=binding,
            source_ref=source_ref,
            max_instances=overrides.max_instances,
            instance_type=settings.instance_type,
            compatibility_flag=settings.compatibility_flag,
            migration_tag=overrides.migration_tag,
            established_project=workspace.established,
        )
    except ValidationError as e:
        raise ConfigError(f"Failed to merge {DESCRIPTOR_FILE}: {e}") from e
    actions.append(
        _action(cwd / DESCRIPTOR_FILE, render_descriptor(descriptor), workspace.descriptor_content)
    )

    actions.append(_plan_if_absent(cwd / TSCONFIG_FILE, render_json(templates.tsconfig())))
    actions.append(_plan_manifest(workspace, project_name))
    actions.append(_plan_if_absent(cwd / IGNORE_FILE, templates.IGNORE_FILE))

    return ScaffoldPlan(
        cwd=cwd,
        project_name=project_name,
        class_name=class_name,
        binding_name=binding,
        source_ref=source_ref,
        port=port,
        descriptor=descriptor,
        actions=actions,
    )


async def apply_plan(plan: ScaffoldPlan, on_progress: ProgressCallback) -> ScaffoldResult:
    """Write every planned change to disk."""
    written: list[str] = []
    for action in plan.actions:
        relative = action.path.relative_to(plan.cwd).as_posix()
        if action.operation == FileOperation.SKIP:
            logger.debug("Skipping %s (%s)", relative, action.reason)
            continue

        await write_atomic(action.path, action.content or "")
        written.append(relative)
        verb = "Generated" if action.operation == FileOperation.CREATE else "Updated"
        on_progress(Severity.SUCCESS, f"{verb} {relative}")

    return ScaffoldResult(
        project_name=plan.project_name,
        class_name=plan.class_name,
        binding_name=plan.binding_name,
        files=written,
    )


async def scaffold(
    detection: DetectionResult,
    overrides: ProjectOverrides,
    cwd: Path,
    choose: ChooseCallback,
    on_progress: ProgressCallback,
) -> ScaffoldResult | None:
    """Create or merge the project files for a detected container project.

    Returns:
        ScaffoldResult, or None if the user declined to modify existing files.

    Raises:
        ConfigError: If existing files cannot be read or merged.
        UsageError: If there is nothing deployable.
    """
    plan = await plan_scaffold(detection, overrides, cwd, choose)
    if plan is None:
        on_progress(Severity.WARNING, "Operation cancelled")
        return None

    on_progress(Severity.INFO, f"Project: {plan.project_name}")
    on_progress(Severity.INFO, f"Class: {plan.class_name}")
    on_progress(Severity.INFO, f"Binding: {plan.binding_name}")
    on_progress(Severity.INFO, f"Port: {plan.port}")

    return await apply_plan(plan, on_progress)
