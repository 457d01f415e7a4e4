"""Generic dumping: every object of every discovered resource type."""

from __future__ import annotations

import logging
from typing import Any

from kube_dump.cluster.models import ApiResource
from kube_dump.dump.context import DumpContext
from kube_dump.dump.enrichers import enricher_for
from kube_dump.dump.files import write_json
from kube_dump.dump.strip import apply_strips
from kube_dump.errors import ClusterRequestError

logger = logging.getLogger(__name__)


def dump_cluster_info(ctx: DumpContext, version: dict[str, Any]) -> None:
    """Cluster-wide files: server version and the discovered resource catalog."""
    write_json(ctx.layout.cluster_version(), version)
    write_json(ctx.layout.api_resources(), [api.model_dump(mode="json") for api in ctx.apis])


async def dump_resource(ctx: DumpContext, resource: ApiResource) -> int:
    """
    List every object of ``resource`` and write it, then run the kind's enricher.
    Returns the number of objects written. Listing errors raise ClusterRequestError;
    filesystem errors propagate as OSError.
    """
    objects = await ctx.client.list_objects(resource, page_size=ctx.page_size)
    enricher = enricher_for(resource)
    written = 0
    for obj in objects:
        metadata = obj.get("metadata") or {}
        name = metadata.get("name")
        if not name:
            logger.warning("Skipping %s %s object without metadata.name", resource.api_version, resource.kind)
            ctx.stats.objects_skipped += 1
            continue
        namespace = metadata.get("namespace")
        object_layout = ctx.layout.for_object(resource, namespace, name)
        apply_strips(obj, ctx.strips)
        write_json(object_layout.representation(), obj)
        written += 1
        ctx.stats.objects_written += 1
        await enricher.enrich(ctx, obj, object_layout)
    return written


async def dump(ctx: DumpContext, version: dict[str, Any]) -> None:
    """Write cluster-level files, then dump each listable resource type in discovery order."""
    dump_cluster_info(ctx, version)
    for resource in ctx.apis:
        if not resource.listable:
            continue
        try:
            count = await dump_resource(ctx, resource)
        except ClusterRequestError as e:
            logger.warning("Failed to dump %s %s: %s", resource.api_version, resource.kind, e)
            ctx.stats.types_failed.append(f"{resource.api_version}/{resource.kind}")
            continue
        ctx.stats.types_dumped += 1
        logger.debug("Dumped %d %s %s objects", count, resource.api_version, resource.kind)
