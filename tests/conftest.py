"""
Pytest fixtures for kube-dump tests: an in-memory API server standing in for the cluster.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import pytest

from kube_dump.cluster.client import ClusterClient
from kube_dump.cluster.discovery import discover_apis
from kube_dump.dump import DumpContext, Layout, parse_strips
from kube_dump.errors import ClusterRequestError


class FakeClusterClient(ClusterClient):
    """
    Serves canned JSON per request path. A list value is a sequence of pages addressed by
    the continue token (the page index); an exception value is raised. Unknown paths 404.
    """

    def __init__(
        self,
        responses: dict[str, Any] | None = None,
        logs: dict[tuple[str, str, str, bool], str] | None = None,
    ) -> None:
        # no ApiClient: every request is answered from ``responses``
        # the dict is shared with the test so later edits are served
        self.responses = responses if responses is not None else {}
        self.logs = dict(logs or {})
        self.requests: list[tuple[str, dict[str, Any]]] = []
        self.log_requests: list[tuple[str, str, str, bool]] = []

    async def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        self.requests.append((path, dict(params or {})))
        value = self.responses.get(path)
        if value is None:
            raise ClusterRequestError(path, "Not Found", 404)
        if isinstance(value, Exception):
            raise value
        if isinstance(value, list):
            value = value[int((params or {}).get("continue") or 0)]
        return copy.deepcopy(value)

    async def read_pod_log(
        self,
        namespace: str,
        name: str,
        container: str,
        previous: bool = False,
    ) -> str:
        key = (namespace, name, container, previous)
        self.log_requests.append(key)
        if key not in self.logs:
            raise ClusterRequestError(
                f"/api/v1/namespaces/{namespace}/pods/{name}/log", "Bad Request", 400
            )
        return self.logs[key]


def resource_entry(name: str, kind: str, namespaced: bool = True, verbs: list[str] | None = None) -> dict[str, Any]:
    return {
        "name": name,
        "singularName": "",
        "namespaced": namespaced,
        "kind": kind,
        "verbs": verbs if verbs is not None else ["get", "list", "watch"],
    }


def object_list(*items: dict[str, Any]) -> dict[str, Any]:
    return {"kind": "List", "apiVersion": "v1", "metadata": {}, "items": list(items)}


def make_pod(name: str, namespace: str, *containers: str) -> dict[str, Any]:
    return {
        "metadata": {
            "name": name,
            "namespace": namespace,
            "uid": f"uid-{name}",
            "managedFields": [{"manager": "kubelet", "operation": "Update"}],
        },
        "spec": {"containers": [{"name": c, "image": "nginx:1.25"} for c in containers]},
        "status": {"phase": "Running"},
    }


def make_event(name: str, message: str, involved: dict[str, Any], namespace: str = "default") -> dict[str, Any]:
    return {
        "metadata": {"name": name, "namespace": namespace},
        "involvedObject": involved,
        "reason": "Test",
        "message": message,
        "type": "Normal",
    }


def cluster_responses() -> dict[str, Any]:
    """A small cluster: one Pod, one ConfigMap, one Secret, one Deployment, one Node."""
    return {
        "/version": {"major": "1", "minor": "29", "gitVersion": "v1.29.2"},
        "/apis": {
            "kind": "APIGroupList",
            "groups": [
                {
                    "name": "apps",
                    "versions": [{"groupVersion": "apps/v1", "version": "v1"}],
                    "preferredVersion": {"groupVersion": "apps/v1", "version": "v1"},
                },
            ],
        },
        "/apis/apps/v1": {
            "kind": "APIResourceList",
            "groupVersion": "apps/v1",
            "resources": [
                resource_entry("deployments", "Deployment"),
                resource_entry("deployments/scale", "Scale", verbs=["get", "patch", "update"]),
                resource_entry("deployments/status", "Deployment", verbs=["get", "list"]),
            ],
        },
        "/api": {"kind": "APIVersions", "versions": ["v1"]},
        "/api/v1": {
            "kind": "APIResourceList",
            "groupVersion": "v1",
            "resources": [
                resource_entry("bindings", "Binding", verbs=["create"]),
                resource_entry("pods", "Pod"),
                resource_entry("pods/log", "Pod", verbs=["get"]),
                resource_entry("configmaps", "ConfigMap"),
                resource_entry("secrets", "Secret"),
                resource_entry("events", "Event"),
                resource_entry("nodes", "Node", namespaced=False),
            ],
        },
        "/apis/apps/v1/deployments": object_list(
            {"metadata": {"name": "web", "namespace": "default"}, "spec": {"replicas": 1}},
        ),
        "/api/v1/pods": object_list(make_pod("web-0", "default", "app")),
        "/api/v1/configmaps": object_list(
            {"metadata": {"name": "cfg", "namespace": "ns"}, "data": {"app.yaml": "port: 8080\n"}},
        ),
        "/api/v1/secrets": object_list(
            {
                "metadata": {"name": "creds", "namespace": "ns"},
                "type": "Opaque",
                "data": {"password": "aHVudGVyMg=="},
            },
        ),
        "/api/v1/nodes": object_list({"metadata": {"name": "node-1"}}),
        "/api/v1/events": object_list(
            make_event(
                "web-0.1",
                "Pulled image nginx:1.25",
                {"kind": "Pod", "apiVersion": "v1", "namespace": "default", "name": "web-0"},
            ),
        ),
    }


@pytest.fixture
def responses() -> dict[str, Any]:
    return cluster_responses()


@pytest.fixture
def fake_client(responses: dict[str, Any]) -> FakeClusterClient:
    return FakeClusterClient(responses, logs={("default", "web-0", "app", False): "hello from app\n"})


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    return tmp_path / "dump"


@pytest.fixture
def make_context(fake_client: FakeClusterClient, out_dir: Path):
    """Build a DumpContext over the fake cluster, running discovery first."""

    async def _make(strips: list[str] | None = None, escape_names: bool = False) -> DumpContext:
        apis = await discover_apis(fake_client)
        return DumpContext(
            client=fake_client,
            layout=Layout(out_dir, escape_names=escape_names),
            apis=apis,
            strips=parse_strips(strips or []),
        )

    return _make
