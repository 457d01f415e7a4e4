"""Cluster layer: API access, resource discovery and the kubectl runner."""

from kube_dump.cluster.client import ClusterClient
from kube_dump.cluster.discovery import discover_apis
from kube_dump.cluster.kubectl import Kubectl
from kube_dump.cluster.models import EVENT_RESOURCE, ApiResource

__all__ = [
    "ApiResource",
    "ClusterClient",
    "EVENT_RESOURCE",
    "Kubectl",
    "discover_apis",
]
