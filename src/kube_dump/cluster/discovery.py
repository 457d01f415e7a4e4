"""Discover every listable API resource type the cluster exposes."""

from __future__ import annotations

import logging
from typing import Any

from kube_dump.cluster.client import ClusterClient
from kube_dump.cluster.models import ApiResource
from kube_dump.errors import ClusterRequestError, DiscoveryError

logger = logging.getLogger(__name__)

LEGACY_VERSION = "v1"


def _resources_from_list(group: str, version: str, resource_list: dict[str, Any]) -> list[ApiResource]:
    """
    Convert an APIResourceList to descriptors, dropping subresources and non-listable types.
    Raises DiscoveryError if the list is not shaped like an APIResourceList.
    """
    where = f"{group}/{version}" if group else version
    entries = resource_list.get("resources")
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise DiscoveryError(f"malformed resource list for {where}: 'resources' is not a list")
    out: list[ApiResource] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise DiscoveryError(f"malformed resource list for {where}: entry {entry!r} is not an object")
        name = entry.get("name")
        kind = entry.get("kind")
        verbs = entry.get("verbs") or []
        if not isinstance(name, str) or not isinstance(kind, str) or not name or not kind:
            raise DiscoveryError(f"malformed resource list for {where}: entry without name or kind")
        if not isinstance(verbs, list) or not all(isinstance(v, str) for v in verbs):
            raise DiscoveryError(f"malformed resource list for {where}: verbs of {name} are not strings")
        if "/" in name or "list" not in verbs:
            continue
        out.append(ApiResource.from_discovery(group, version, entry))
    return out


def _select_version(group: dict[str, Any]) -> str:
    """Preferred version of an APIGroup, else the first (newest) advertised one."""
    preferred = group.get("preferredVersion")
    if isinstance(preferred, dict) and isinstance(preferred.get("version"), str) and preferred["version"]:
        return preferred["version"]
    versions = group.get("versions") or []
    if isinstance(versions, list):
        for v in versions:
            if isinstance(v, dict) and isinstance(v.get("version"), str) and v["version"]:
                return v["version"]
    raise DiscoveryError(f"api group {group.get('name')!r} advertises no versions")


async def _discover_api_group(client: ClusterClient, group: dict[str, Any]) -> list[ApiResource]:
    name = group.get("name")
    if not isinstance(name, str) or not name:
        raise DiscoveryError("api group without a name")
    version = _select_version(group)
    resource_list = await client.list_api_group_resources(name, version)
    return _resources_from_list(name, version, resource_list)


async def discover_grouped_apis(client: ClusterClient) -> list[ApiResource]:
    """Resources of all named API groups; a group that fails is skipped with a warning."""
    try:
        groups = (await client.list_api_groups()).get("groups") or []
    except ClusterRequestError as e:
        raise DiscoveryError(f"failed to list api groups: {e}") from e
    if not isinstance(groups, list):
        raise DiscoveryError("failed to list api groups: 'groups' is not a list")

    apis: list[ApiResource] = []
    for group in groups:
        if not isinstance(group, dict):
            logger.warning("Ignoring malformed api group entry: %r", group)
            continue
        group_name = group.get("name") or "<unnamed>"
        try:
            apis.extend(await _discover_api_group(client, group))
        except (ClusterRequestError, DiscoveryError) as e:
            logger.warning("Failed to discover api group %s: %s", group_name, e)
    return apis


async def discover_legacy_apis(client: ClusterClient) -> list[ApiResource]:
    """Resources of the core group (/api/v1), which /apis does not report."""
    try:
        versions = (await client.list_legacy_api_versions()).get("versions") or []
    except ClusterRequestError as e:
        raise DiscoveryError(f"failed to list legacy api group versions: {e}") from e
    if not isinstance(versions, list):
        versions = []
    if LEGACY_VERSION not in versions:
        raise DiscoveryError(f"legacy {LEGACY_VERSION} not supported by this cluster (found {versions})")
    try:
        resource_list = await client.list_legacy_api_resources(LEGACY_VERSION)
    except ClusterRequestError as e:
        raise DiscoveryError(f"failed to list legacy {LEGACY_VERSION} resources: {e}") from e
    return _resources_from_list("", LEGACY_VERSION, resource_list)


async def discover_apis(client: ClusterClient) -> list[ApiResource]:
    """
    Discover all listable resources: named groups first, then the core group.
    Raises DiscoveryError when the top-level listings fail or the core v1 API is missing.
    """
    apis = await discover_grouped_apis(client)
    apis.extend(await discover_legacy_apis(client))
    logger.debug("Discovered %d api resources", len(apis))
    return apis
