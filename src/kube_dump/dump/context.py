"""Explicit state shared by every dumper."""

from __future__ import annotations

from dataclasses import dataclass, field

from kube_dump.cluster.client import DEFAULT_PAGE_SIZE, ClusterClient
from kube_dump.cluster.kubectl import Kubectl
from kube_dump.cluster.models import ApiResource
from kube_dump.dump.layout import Layout
from kube_dump.dump.strip import Strip


@dataclass
class DumpStats:
    """Counters reported at the end of a run."""

    types_dumped: int = 0
    types_failed: list[str] = field(default_factory=list)
    objects_written: int = 0
    objects_skipped: int = 0
    log_files_written: int = 0
    data_files_written: int = 0
    event_logs_written: int = 0
    event_groups_skipped: int = 0
    events_dropped: int = 0


@dataclass
class DumpContext:
    """Data passed to dumpers."""

    client: ClusterClient
    layout: Layout
    apis: list[ApiResource]
    strips: list[Strip] = field(default_factory=list)
    kubectl: Kubectl = field(default_factory=Kubectl.disabled)
    page_size: int = DEFAULT_PAGE_SIZE
    stats: DumpStats = field(default_factory=DumpStats)
