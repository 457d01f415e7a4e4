"""Async facade over the official Kubernetes client, returning raw JSON documents."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import urllib3
from kubernetes import client, config
from kubernetes.client.rest import ApiException

from kube_dump.cluster.models import ApiResource
from kube_dump.errors import ClusterRequestError, KubeDumpError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 500


def _load_kube_config(kubeconfig_path: str | None, context: str | None) -> client.Configuration:
    """Load in-cluster or kubeconfig-based configuration."""
    if not kubeconfig_path and not context:
        try:
            config.load_incluster_config()
            return client.Configuration.get_default_copy()
        except config.ConfigException:
            pass
    kwargs: dict[str, Any] = {}
    if kubeconfig_path:
        kwargs["config_file"] = str(kubeconfig_path)
    if context:
        kwargs["context"] = context
    config.load_kube_config(**kwargs)
    return client.Configuration.get_default_copy()


class ClusterClient:
    """
    Read-only access to the API server. Every request runs the blocking client in a worker
    thread and is awaited before the caller continues; failures surface as ClusterRequestError.
    """

    def __init__(self, api_client: client.ApiClient) -> None:
        self._api = api_client
        self._core = client.CoreV1Api(api_client)

    @classmethod
    def connect(cls, kubeconfig: str | None = None, context: str | None = None) -> ClusterClient:
        try:
            cfg = _load_kube_config(kubeconfig, context)
        except config.ConfigException as e:
            raise KubeDumpError(f"connection failed: {e}") from e
        return cls(client.ApiClient(cfg))

    async def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET ``path`` and return the decoded JSON body."""
        return await asyncio.to_thread(self._get_json, path, params or {})

    def _get_json(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._api.call_api(
                path,
                "GET",
                query_params=[(k, v) for k, v in params.items() if v is not None],
                header_params={"Accept": "application/json"},
                auth_settings=["BearerToken"],
                _return_http_data_only=True,
                _preload_content=False,
            )
            body = json.loads(response.data)
        except ApiException as e:
            raise ClusterRequestError(path, e.reason or "request failed", e.status) from e
        except urllib3.exceptions.HTTPError as e:
            raise ClusterRequestError(path, f"transport error: {e}") from e
        except ValueError as e:
            raise ClusterRequestError(path, f"malformed response: {e}") from e
        if not isinstance(body, dict):
            raise ClusterRequestError(path, "malformed response: expected a JSON object")
        return body

    async def get_version(self) -> dict[str, Any]:
        return await self.get("/version")

    async def list_api_groups(self) -> dict[str, Any]:
        return await self.get("/apis")

    async def list_api_group_resources(self, group: str, version: str) -> dict[str, Any]:
        return await self.get(f"/apis/{group}/{version}")

    async def list_legacy_api_versions(self) -> dict[str, Any]:
        return await self.get("/api")

    async def list_legacy_api_resources(self, version: str) -> dict[str, Any]:
        return await self.get(f"/api/{version}")

    async def list_objects(
        self,
        resource: ApiResource,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> list[dict[str, Any]]:
        """List every object of ``resource`` in all namespaces, following continue tokens."""
        items: list[dict[str, Any]] = []
        token: str | None = None
        while True:
            page = await self.get(resource.list_path, {"limit": page_size, "continue": token})
            items.extend(page.get("items") or [])
            token = (page.get("metadata") or {}).get("continue")
            if not token:
                return items

    async def read_pod_log(
        self,
        namespace: str,
        name: str,
        container: str,
        previous: bool = False,
    ) -> str:
        """Fetch the log of one container (or its previous instance) with timestamps."""
        path = f"/api/v1/namespaces/{namespace}/pods/{name}/log"
        try:
            return await asyncio.to_thread(
                self._core.read_namespaced_pod_log,
                name=name,
                namespace=namespace,
                container=container,
                previous=previous,
                timestamps=True,
            )
        except ApiException as e:
            raise ClusterRequestError(path, e.reason or "request failed", e.status) from e
        except urllib3.exceptions.HTTPError as e:
            raise ClusterRequestError(path, f"transport error: {e}") from e
