"""Where every piece of the dump lives on disk."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from kube_dump.cluster.models import ApiResource

GLOBAL_NAMESPACE = "_global_"

# '%' comes first so that escape sequences produced for the others stay unambiguous.
_NAME_ESCAPES = (("%", "%25"), ("~", "%7E"), (":", "%3A"))


def escape_name(name: str) -> str:
    """Replace characters that are unsafe or ambiguous in a path segment."""
    for raw, escaped in _NAME_ESCAPES:
        name = name.replace(raw, escaped)
    return name


@dataclass(frozen=True)
class ObjectIdentity:
    """Addressing key of one object: two objects with the same identity share a directory."""

    group: str
    kind: str
    namespace: str | None
    name: str

    @classmethod
    def of(cls, resource: ApiResource, namespace: str | None, name: str) -> ObjectIdentity:
        return cls(group=resource.group, kind=resource.kind, namespace=namespace or None, name=name)


class Layout:
    """Layout tells where a specific thing should live under the dump root."""

    def __init__(self, root: Path, escape_names: bool = False) -> None:
        self.root = Path(root)
        self.escape_names = escape_names

    def cluster_info(self) -> Path:
        """Output of ``kubectl cluster-info``."""
        return self.root / "cluster-info.txt"

    def cluster_version(self) -> Path:
        return self.root / "cluster-version.json"

    def api_resources(self) -> Path:
        """All discovered API resources."""
        return self.root / "apis.json"

    def object_layout(self, identity: ObjectIdentity) -> ObjectLayout:
        path = self.root / (identity.namespace or GLOBAL_NAMESPACE)
        if identity.group:
            path = path / identity.group
        name = escape_name(identity.name) if self.escape_names else identity.name
        return ObjectLayout(path / identity.kind / name)

    def for_object(self, resource: ApiResource, namespace: str | None, name: str) -> ObjectLayout:
        return self.object_layout(ObjectIdentity.of(resource, namespace, name))


@dataclass(frozen=True)
class ObjectLayout:
    """Files belonging to one object."""

    root: Path

    def representation(self) -> Path:
        return self.root / "raw.json"

    def logs(self, container: str, previous: bool = False) -> Path:
        suffix = "-prev" if previous else ""
        return self.root / f"logs-{container}{suffix}.txt"

    def data(self, key: str) -> Path:
        """One ConfigMap or Secret data key."""
        return self.root / f"data-{key}"

    def events(self) -> Path:
        return self.root / "events.txt"
