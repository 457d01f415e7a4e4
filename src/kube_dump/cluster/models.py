"""Structured models for Kubernetes API resource discovery."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ApiResource(BaseModel):
    """One resource type exposed by the API server, as reported by discovery."""

    model_config = ConfigDict(frozen=True)

    group: str = Field(default="", description="API group; empty for the core (legacy) group")
    version: str
    kind: str  # e.g. Deployment
    plural: str  # e.g. deployments, used verbatim in request paths
    namespaced: bool = True
    verbs: tuple[str, ...] = ()

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    @property
    def is_legacy(self) -> bool:
        return not self.group

    @property
    def listable(self) -> bool:
        """True if the type can be enumerated and is not a subresource."""
        return "/" not in self.plural and "list" in self.verbs

    @property
    def list_path(self) -> str:
        """Request path for listing every object of this type across namespaces."""
        if self.is_legacy:
            return f"/api/{self.version}/{self.plural}"
        return f"/apis/{self.group}/{self.version}/{self.plural}"

    @classmethod
    def from_discovery(cls, group: str, version: str, entry: dict[str, Any]) -> ApiResource:
        """Build from one entry of an APIResourceList; name and group are taken verbatim."""
        return cls(
            group=group,
            version=version,
            kind=entry["kind"],
            plural=entry["name"],
            namespaced=bool(entry.get("namespaced", True)),
            verbs=tuple(entry.get("verbs") or ()),
        )

    @classmethod
    def from_kind(cls, group: str, version: str, kind: str) -> ApiResource:
        """
        Descriptor for a statically known type. The plural is guessed as lowercase kind + "s",
        which only holds for simple kinds; discovered types never go through here.
        """
        return cls(
            group=group,
            version=version,
            kind=kind,
            plural=kind.lower() + "s",
            verbs=("list",),
        )


EVENT_RESOURCE = ApiResource.from_kind("", "v1", "Event")
