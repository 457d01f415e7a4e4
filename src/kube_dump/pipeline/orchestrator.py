"""Orchestrator: connect → discover → dump objects → correlate events → report."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from kube_dump.cluster import ClusterClient, Kubectl, discover_apis
from kube_dump.cluster.models import ApiResource
from kube_dump.config import Settings, get_settings
from kube_dump.dump import DumpContext, DumpStats, Layout, correlate_events, dump, parse_strips
from kube_dump.dump.files import write_text
from kube_dump.errors import ClusterRequestError, KubeDumpError, KubectlError

logger = logging.getLogger(__name__)


@dataclass
class DumpResult:
    """Result of a full dump run."""

    out: str
    version: dict[str, Any]
    apis: list[ApiResource]
    stats: DumpStats

    @property
    def server_version(self) -> str:
        return f"v{self.version.get('major', '?')}.{self.version.get('minor', '?')}"

    @property
    def complete(self) -> bool:
        return not self.stats.types_failed


async def write_cluster_info(ctx: DumpContext) -> None:
    """kubectl cluster-info output; skipped when kubectl is disabled or fails."""
    try:
        cluster_info = await ctx.kubectl.exec("cluster-info")
    except (OSError, KubectlError) as e:
        logger.warning("Failed to get cluster info: %s", e)
        return
    if cluster_info is not None:
        write_text(ctx.layout.cluster_info(), cluster_info)


async def run_dump(
    settings: Settings | None = None,
    client: ClusterClient | None = None,
    kubectl: Kubectl | None = None,
) -> DumpResult:
    """
    Run the full pipeline once. Raises KubeDumpError when no baseline can be established
    (cluster unreachable, discovery fails) and OSError when the output cannot be written.
    """
    opts = settings or get_settings()
    if opts.out is None:
        raise KubeDumpError("no output directory configured")
    kubeconfig = str(opts.kubeconfig) if opts.kubeconfig else None

    logger.info("Connecting to cluster")
    cluster = client or ClusterClient.connect(kubeconfig, opts.context)
    try:
        version = await cluster.get_version()
    except ClusterRequestError as e:
        raise KubeDumpError(f"failed to get kubernetes version: {e}") from e
    logger.info("Connected to Kubernetes v%s.%s", version.get("major"), version.get("minor"))

    apis = await discover_apis(cluster)
    logger.info("Discovered %d api resources", len(apis))
    for resource in apis:
        logger.debug(" - %s/%s", resource.api_version, resource.plural)

    if kubectl is None:
        if opts.kubectl_enabled:
            kubectl = await Kubectl.try_new(opts.kubectl_path, kubeconfig, opts.context)
        else:
            kubectl = Kubectl.disabled()

    ctx = DumpContext(
        client=cluster,
        layout=Layout(opts.out, escape_names=opts.escape_names),
        apis=apis,
        strips=parse_strips(opts.strip),
        kubectl=kubectl,
        page_size=opts.list_page_size,
    )
    ctx.layout.root.mkdir(parents=True, exist_ok=True)

    await write_cluster_info(ctx)
    logger.info("Running generic dumper")
    await dump(ctx, version)
    logger.info("Correlating events")
    await correlate_events(ctx)

    return DumpResult(out=str(ctx.layout.root), version=version, apis=apis, stats=ctx.stats)


def print_result(result: DumpResult, console: Console | None = None) -> None:
    """Print dump summary to console using Rich."""
    c = console or Console()
    stats = result.stats
    table = Table(show_header=False, box=None)
    table.add_row("Kubernetes", result.server_version)
    table.add_row("Output", result.out)
    table.add_row("API resources", str(len(result.apis)))
    table.add_row("Types dumped", str(stats.types_dumped))
    table.add_row("Types failed", str(len(stats.types_failed)))
    table.add_row("Objects written", str(stats.objects_written))
    table.add_row("Log files", str(stats.log_files_written))
    table.add_row("Data files", str(stats.data_files_written))
    table.add_row("Event logs", f"{stats.event_logs_written} written, {stats.event_groups_skipped} skipped")
    c.print(Panel(table, title="kube-dump", border_style="green" if result.complete else "yellow"))
    if stats.types_failed:
        c.print("[bold yellow]Incomplete:[/bold yellow] failed to list " + ", ".join(stats.types_failed))
