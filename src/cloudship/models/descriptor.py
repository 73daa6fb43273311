"""Typed view of the deployment descriptor (wrangler.jsonc).

Only the fields the merge engine reads or writes are modelled. Everything
else is carried through untouched via ``extra="allow"`` and the original
document, so unrelated user edits survive a read-modify-write cycle.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class ContainerResource(BaseModel):
    """A resource class bound to a source reference."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    class_name: str
    source_ref: str | None = Field(default=None, alias="image")
    max_instances: int | None = None
    instance_type: str | None = None


class Binding(BaseModel):
    """Named handle through which worker code addresses a resource class."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    class_name: str
    binding_name: str = Field(alias="name")


class DurableObjects(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    bindings: list[Binding] | None = None


class Migration(BaseModel):
    """A named batch of newly registered resource classes."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    registered_classes: list[str] | None = Field(default=None, alias="new_sqlite_classes")
    tag: str | None = None

    @property
    def classes(self) -> list[str]:
        return list(self.registered_classes or [])

    @property
    def legacy_classes(self) -> list[str]:
        """Hand-written ``new_classes`` entries."""
        extra = self.model_extra or {}
        return list(extra.get("new_classes") or [])

    @property
    def size(self) -> int:
        """Number of classes this migration registers, legacy entries included."""
        return len(self.classes) + len(self.legacy_classes)

    def registers(self, class_name: str) -> bool:
        """True if this migration already introduces class_name."""
        return class_name in self.classes or class_name in self.legacy_classes


class DeploymentDescriptor(BaseModel):
    """The persisted deployment configuration document."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    resources: list[ContainerResource] | None = Field(default=None, alias="containers")
    durable_objects: DurableObjects | None = None
    migrations: list[Migration] | None = None
    compatibility_flags: list[str] | None = None

    _source: dict[str, Any] = PrivateAttr(default_factory=dict)
    _header: str = PrivateAttr(default="")

    @classmethod
    def from_document(cls, document: dict[str, Any], header: str = "") -> "DeploymentDescriptor":
        """Build a descriptor from a parsed document, remembering its layout."""
        descriptor = cls.model_validate(document)
        descriptor._source = dict(document)
        descriptor._header = header
        return descriptor

    @property
    def header(self) -> str:
        """Leading comment block of the file this descriptor was read from."""
        return self._header

    @property
    def bindings(self) -> list[Binding]:
        if self.durable_objects is None:
            return []
        return list(self.durable_objects.bindings or [])

    def class_names(self) -> set[str]:
        """Every class name referenced by a resource or binding."""
        names = {r.class_name for r in self.resources or []}
        names.update(b.class_name for b in self.bindings)
        return names

    def to_document(self) -> dict[str, Any]:
        """Serialize back to a plain document.

        Keys keep the position they had in the loaded document, at every
        nesting level; keys added by a merge are appended.
        """
        return _overlay(self._source, self.model_dump(by_alias=True, exclude_none=True))


def _overlay(source: Any, dumped: Any) -> Any:
    """Lay dumped values over source, keeping the key order of source.

    List entries are matched by position; merges only replace in place or append.
    """
    if isinstance(source, dict) and isinstance(dumped, dict):
        merged = dict(source)
        for key, value in dumped.items():
            merged[key] = _overlay(source.get(key), value)
        return merged
    if isinstance(source, list) and isinstance(dumped, list):
        return [
            _overlay(source[i], item) if i < len(source) else item
            for i, item in enumerate(dumped)
        ]
    return dumped
