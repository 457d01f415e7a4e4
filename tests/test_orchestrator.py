"""End-to-end tests of the dump pipeline against the fake cluster."""

import json
from pathlib import Path

import pytest
from rich.console import Console

from kube_dump.cluster.kubectl import Kubectl
from kube_dump.config import Settings
from kube_dump.errors import ClusterRequestError, DiscoveryError, KubeDumpError, KubectlError
from kube_dump.pipeline import print_result, run_dump


class StubKubectl(Kubectl):
    def __init__(self, output: str | None = None, error: Exception | None = None) -> None:
        super().__init__(enabled=True)
        self.output = output
        self.error = error
        self.calls: list[tuple[str, ...]] = []

    async def exec(self, *args: str) -> str | None:
        self.calls.append(args)
        if self.error is not None:
            raise self.error
        return self.output


def _settings(out_dir: Path, **kwargs) -> Settings:
    return Settings(out=out_dir, kubectl_enabled=False, **kwargs)


@pytest.mark.asyncio
async def test_full_run(fake_client, out_dir: Path) -> None:
    kubectl = StubKubectl("Kubernetes control plane is running at https://10.0.0.1:6443\n")
    result = await run_dump(_settings(out_dir, strip=["managed-fields"]), client=fake_client, kubectl=kubectl)

    assert result.server_version == "v1.29"
    assert result.complete
    assert kubectl.calls == [("cluster-info",)]
    assert (out_dir / "cluster-info.txt").read_text().startswith("Kubernetes control plane")
    assert json.loads((out_dir / "cluster-version.json").read_text())["gitVersion"] == "v1.29.2"

    pod_dir = out_dir / "default" / "Pod" / "web-0"
    raw = json.loads((pod_dir / "raw.json").read_text())
    assert raw["metadata"]["managedFields"] is None
    assert (pod_dir / "logs-app.txt").exists()
    assert not (pod_dir / "logs-app-prev.txt").exists()
    assert (pod_dir / "events.txt").read_text() == "Pulled image nginx:1.25\n"
    assert (out_dir / "ns" / "ConfigMap" / "cfg" / "data-app.yaml").read_text() == "port: 8080\n"

    stats = result.stats
    assert stats.types_dumped == 6
    assert stats.objects_written == 6
    assert stats.event_logs_written == 1


@pytest.mark.asyncio
async def test_cluster_info_failure_is_not_fatal(fake_client, out_dir: Path) -> None:
    kubectl = StubKubectl(error=KubectlError("kubectl cluster-info exited with 1"))
    result = await run_dump(_settings(out_dir), client=fake_client, kubectl=kubectl)
    assert not (out_dir / "cluster-info.txt").exists()
    assert (out_dir / "default" / "Pod" / "web-0" / "raw.json").exists()
    assert result.complete


@pytest.mark.asyncio
async def test_disabled_kubectl_writes_no_cluster_info(fake_client, out_dir: Path) -> None:
    await run_dump(_settings(out_dir), client=fake_client, kubectl=Kubectl.disabled())
    assert not (out_dir / "cluster-info.txt").exists()


@pytest.mark.asyncio
async def test_unreachable_cluster_is_fatal(fake_client, responses, out_dir: Path) -> None:
    responses["/version"] = ClusterRequestError("/version", "transport error: connection refused")
    with pytest.raises(KubeDumpError, match="failed to get kubernetes version"):
        await run_dump(_settings(out_dir), client=fake_client, kubectl=Kubectl.disabled())
    assert not out_dir.exists()


@pytest.mark.asyncio
async def test_missing_legacy_api_is_fatal(fake_client, responses, out_dir: Path) -> None:
    responses["/api"] = {"versions": []}
    with pytest.raises(DiscoveryError):
        await run_dump(_settings(out_dir), client=fake_client, kubectl=Kubectl.disabled())


@pytest.mark.asyncio
async def test_partial_failures_report_incomplete(fake_client, responses, out_dir: Path) -> None:
    responses["/api/v1/secrets"] = ClusterRequestError("/api/v1/secrets", "Forbidden", 403)
    result = await run_dump(_settings(out_dir), client=fake_client, kubectl=Kubectl.disabled())
    assert not result.complete
    assert result.stats.types_failed == ["v1/Secret"]

    console = Console(record=True, width=120)
    print_result(result, console)
    text = console.export_text()
    assert "Objects written" in text
    assert "v1/Secret" in text


@pytest.mark.asyncio
async def test_output_directory_is_required(fake_client) -> None:
    with pytest.raises(KubeDumpError, match="no output directory"):
        await run_dump(Settings(out=None), client=fake_client, kubectl=Kubectl.disabled())
