"""Exceptions raised by kube-dump."""

from __future__ import annotations


class KubeDumpError(Exception):
    """Base class for errors that abort or degrade a dump."""


class ClusterRequestError(KubeDumpError):
    """A request to the API server failed (HTTP error, transport error or malformed body)."""

    def __init__(self, path: str, reason: str, status: int | None = None) -> None:
        self.path = path
        self.reason = reason
        self.status = status
        prefix = f"{status} " if status else ""
        super().__init__(f"GET {path}: {prefix}{reason}")


class DiscoveryError(KubeDumpError):
    """API discovery could not establish the baseline resource catalog."""


class KubectlError(KubeDumpError):
    """kubectl exited with a non-zero status."""
