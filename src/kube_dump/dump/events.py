"""Correlate events with the objects they describe and write them beside those objects."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from kube_dump.cluster.models import EVENT_RESOURCE
from kube_dump.dump.context import DumpContext
from kube_dump.dump.files import write_text
from kube_dump.dump.layout import ObjectIdentity
from kube_dump.errors import ClusterRequestError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvolvedObjectKey:
    """Identity of the object an event is about."""

    group: str | None
    kind: str
    namespace: str | None
    name: str

    def sort_key(self) -> tuple[str, str, str, str]:
        # None sorts before every string
        return (self.group or "", self.kind, self.namespace or "", self.name)

    def identity(self) -> ObjectIdentity:
        return ObjectIdentity(
            group=self.group or "",
            kind=self.kind,
            namespace=self.namespace,
            name=self.name,
        )

    def __str__(self) -> str:
        kind = f"{self.group}/{self.kind}" if self.group else self.kind
        return f"{kind} {self.namespace or '-'}/{self.name}"


def group_from_api_version(api_version: str | None) -> str | None:
    """
    "apps/v1" -> "apps"; "v1" or missing -> None (core group). Events written by some
    components omit or misreport apiVersion, so this is best effort.
    """
    if not api_version or "/" not in api_version:
        return None
    return api_version.rsplit("/", 1)[0] or None


def involved_object_key(event: dict[str, Any]) -> InvolvedObjectKey | None:
    """Key of the event's involvedObject, or None if it lacks a kind or name."""
    ref = event.get("involvedObject") or {}
    kind = ref.get("kind")
    name = ref.get("name")
    if not kind or not name:
        return None
    return InvolvedObjectKey(
        group=group_from_api_version(ref.get("apiVersion")),
        kind=kind,
        namespace=ref.get("namespace") or None,
        name=name,
    )


def group_events(ctx: DumpContext, events: list[dict[str, Any]]) -> dict[InvolvedObjectKey, list[dict[str, Any]]]:
    """Group events by involved object; keys come back sorted, events keep source order."""
    grouped: dict[InvolvedObjectKey, list[dict[str, Any]]] = {}
    for event in events:
        key = involved_object_key(event)
        if key is None:
            meta = event.get("metadata") or {}
            logger.warning(
                "Dropping event %s/%s: involvedObject has no kind or name",
                meta.get("namespace") or "-",
                meta.get("name") or "<unnamed>",
            )
            ctx.stats.events_dropped += 1
            continue
        grouped.setdefault(key, []).append(event)
    return {key: grouped[key] for key in sorted(grouped, key=InvolvedObjectKey.sort_key)}


async def correlate_events(ctx: DumpContext) -> None:
    """
    Fetch all events once and write each object's events to its events.txt.
    Must run after the object dumps: an object counts as dumped iff its raw.json exists.
    """
    try:
        events = await ctx.client.list_objects(EVENT_RESOURCE, page_size=ctx.page_size)
    except ClusterRequestError as e:
        logger.warning("Failed to list events, skipping event correlation: %s", e)
        return

    for key, group in group_events(ctx, events).items():
        object_layout = ctx.layout.object_layout(key.identity())
        if not object_layout.representation().exists():
            logger.info("Skipping %d events for %s: object was not dumped", len(group), key)
            ctx.stats.event_groups_skipped += 1
            continue
        text = "\n".join(event.get("message") or "" for event in group)
        write_text(object_layout.events(), text + "\n")
        ctx.stats.event_logs_written += 1
