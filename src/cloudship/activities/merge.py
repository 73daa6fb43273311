"""Descriptor merge engine.

Evolves a DeploymentDescriptor in place across repeated scaffolds while
keeping its invariants:

- resources and bindings are unique by class name
- a class name appears in at most one migration
- batch allocation never grows a migration past MIGRATION_BATCH_SIZE
  (an explicit migration tag may, on purpose)
- the baseline compatibility flag is present

Every input is an explicit parameter; nothing is read from the environment.
"""

import logging
import re

from cloudship.models.descriptor import (
    Binding,
    ContainerResource,
    DeploymentDescriptor,
    DurableObjects,
    Migration,
)

logger = logging.getLogger(__name__)

MIGRATION_BATCH_SIZE = 3
BASELINE_TAG = "v1"
# First tag for projects that look hand-maintained, which may already have
# used low tags outside our bookkeeping
ESTABLISHED_PROJECT_TAG = "v10"

_NUMBERED_TAG = re.compile(r"v(\d+)")


def upsert_resource(descriptor: DeploymentDescriptor, resource: ContainerResource) -> bool:
    """Update the resource with the same class name, or append it.

    Keys the update does not set (hand-added rollout options, say) are kept.

    Returns:
        True if an existing entry was replaced.
    """
    resources = list(descriptor.resources or [])
    for i, existing in enumerate(resources):
        if existing.class_name == resource.class_name:
            resources[i] = existing.model_copy(update=resource.model_dump(exclude_none=True))
            descriptor.resources = resources
            return True
    descriptor.resources = [*resources, resource]
    return False


def upsert_binding(descriptor: DeploymentDescriptor, binding: Binding) -> bool:
    """Update the binding with the same class name, or append it."""
    durable_objects = descriptor.durable_objects or DurableObjects()
    bindings = list(durable_objects.bindings or [])
    replaced = False
    for i, existing in enumerate(bindings):
        if existing.class_name == binding.class_name:
            bindings[i] = existing.model_copy(update=binding.model_dump(exclude_none=True))
            replaced = True
            break
    else:
        bindings.append(binding)

    durable_objects.bindings = bindings
    descriptor.durable_objects = durable_objects
    return replaced


def find_registration(descriptor: DeploymentDescriptor, class_name: str) -> Migration | None:
    """The migration that registers class_name, if any."""
    for migration in descriptor.migrations or []:
        if migration.registers(class_name):
            return migration
    return None


def next_migration_tag(migrations: list[Migration]) -> str:
    """A ``v<n>`` tag that no migration uses yet.

    Starts past both the migration count and the highest numbered tag.
    """
    used = {m.tag for m in migrations if m.tag}
    numbers = [int(match.group(1)) for tag in used if (match := _NUMBERED_TAG.fullmatch(tag))]
    candidate = max([len(migrations), *numbers]) + 1
    while f"v{candidate}" in used:
        candidate += 1
    return f"v{candidate}"


def _append_class(migration: Migration, class_name: str) -> None:
    # Reassign rather than mutate so the field always serializes
    migration.registered_classes = [*migration.classes, class_name]


def register_class(
    descriptor: DeploymentDescriptor,
    class_name: str,
    migration_tag: str | None = None,
    established_project: bool = False,
) -> str | None:
    """Place class_name in exactly one migration.

    Args:
        descriptor: Descriptor to update in place.
        class_name: Resource class to register.
        migration_tag: Explicit tag to use instead of batch allocation.
        established_project: Pick the elevated starting tag when the
            descriptor has no migrations yet.

    Returns:
        The tag the class was placed under, or None if it was already registered.
    """
    existing = find_registration(descriptor, class_name)
    if existing is not None:
        logger.info("Class %s already exists in migration %s, skipping", class_name, existing.tag)
        return None

    migrations = list(descriptor.migrations or [])

    if migration_tag:
        target = next((m for m in migrations if m.tag == migration_tag), None)
        if target is not None:
            _append_class(target, class_name)
        else:
            migrations.append(Migration(registered_classes=[class_name], tag=migration_tag))
        descriptor.migrations = migrations
        logger.info("Using manual migration tag %s for %s", migration_tag, class_name)
        return migration_tag

    if not migrations:
        tag = ESTABLISHED_PROJECT_TAG if established_project else BASELINE_TAG
        descriptor.migrations = [Migration(registered_classes=[class_name], tag=tag)]
        logger.info("Created new migration %s for %s", tag, class_name)
        return tag

    latest = migrations[-1]
    if latest.size < MIGRATION_BATCH_SIZE:
        _append_class(latest, class_name)
        descriptor.migrations = migrations
        logger.info("Added %s to existing migration %s", class_name, latest.tag)
        return latest.tag

    tag = next_migration_tag(migrations)
    migrations.append(Migration(registered_classes=[class_name], tag=tag))
    descriptor.migrations = migrations
    logger.info("Created new migration %s for %s", tag, class_name)
    return tag


def ensure_compatibility_flag(descriptor: DeploymentDescriptor, flag: str) -> None:
    flags = list(descriptor.compatibility_flags or [])
    if flag not in flags:
        flags.append(flag)
    descriptor.compatibility_flags = flags


def merge_descriptor(
    descriptor: DeploymentDescriptor,
    *,
    class_name: str,
    binding_name: str,
    source_ref: str,
    max_instances: int,
    instance_type: str,
    compatibility_flag: str,
    migration_tag: str | None = None,
    established_project: bool = False,
) -> DeploymentDescriptor:
    """Merge one resource class into the descriptor. Safe to repeat."""
    resource = ContainerResource(
        class_name=class_name,
        source_ref=source_ref,
        max_instances=max_instances,
        instance_type=instance_type,
    )
    if upsert_resource(descriptor, resource):
        logger.info("Updated existing container configuration for %s", class_name)
    else:
        logger.info("Added new container configuration for %s", class_name)

    upsert_binding(descriptor, Binding(class_name=class_name, binding_name=binding_name))
    register_class(
        descriptor,
        class_name,
        migration_tag=migration_tag,
        established_project=established_project,
    )
    ensure_compatibility_flag(descriptor, compatibility_flag)
    return descriptor
