"""Per-kind post-processing run after an object's representation has been written."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from kube_dump.cluster.models import ApiResource
from kube_dump.dump.context import DumpContext
from kube_dump.dump.files import write_text
from kube_dump.dump.layout import ObjectLayout
from kube_dump.errors import ClusterRequestError

logger = logging.getLogger(__name__)


class Enricher(Protocol):
    async def enrich(self, ctx: DumpContext, obj: dict[str, Any], layout: ObjectLayout) -> None: ...


class NoopEnricher:
    """Kinds without special handling."""

    async def enrich(self, ctx: DumpContext, obj: dict[str, Any], layout: ObjectLayout) -> None:
        return None


async def fetch_container_logs(
    ctx: DumpContext,
    namespace: str,
    pod: str,
    container: str,
    previous: bool = False,
) -> str | None:
    """
    Logs of one container, or None when there are none to fetch. A container that has not
    started yet or never restarted has no (previous) logs, so failures are expected here.
    """
    try:
        return await ctx.client.read_pod_log(namespace, pod, container, previous=previous)
    except ClusterRequestError as e:
        logger.debug(
            "No %slogs for %s/%s container %s: %s",
            "previous " if previous else "",
            namespace,
            pod,
            container,
            e,
        )
        return None


class PodEnricher:
    """Writes current and previous logs of every container."""

    async def enrich(self, ctx: DumpContext, obj: dict[str, Any], layout: ObjectLayout) -> None:
        metadata = obj.get("metadata") or {}
        name = metadata.get("name")
        namespace = metadata.get("namespace")
        if not name or not namespace:
            return
        for container in (obj.get("spec") or {}).get("containers") or []:
            cname = container.get("name")
            if not cname:
                continue
            for previous in (False, True):
                logs = await fetch_container_logs(ctx, namespace, name, cname, previous=previous)
                if logs is None:
                    continue
                write_text(layout.logs(cname, previous=previous), logs)
                ctx.stats.log_files_written += 1


class DataEnricher:
    """Writes one file per data key, values exactly as served by the API."""

    def __init__(self, *fields: str) -> None:
        self.fields = fields

    async def enrich(self, ctx: DumpContext, obj: dict[str, Any], layout: ObjectLayout) -> None:
        for data_field in self.fields:
            for key, value in (obj.get(data_field) or {}).items():
                write_text(layout.data(key), "" if value is None else str(value))
                ctx.stats.data_files_written += 1


_REGISTRY: dict[tuple[str, str], Enricher] = {
    ("", "Pod"): PodEnricher(),
    ("", "ConfigMap"): DataEnricher("data", "binaryData"),
    ("", "Secret"): DataEnricher("data", "stringData"),
}

_NOOP = NoopEnricher()


def register_enricher(group: str, kind: str, enricher: Enricher) -> None:
    _REGISTRY[(group, kind)] = enricher


def enricher_for(resource: ApiResource) -> Enricher:
    """Enricher registered for the resource's (group, kind), or a no-op."""
    return _REGISTRY.get((resource.group, resource.kind), _NOOP)
