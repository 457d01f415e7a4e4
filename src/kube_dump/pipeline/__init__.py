"""Pipeline: orchestration of connect → discover → dump → correlate."""

from kube_dump.pipeline.orchestrator import DumpResult, print_result, run_dump

__all__ = [
    "DumpResult",
    "print_result",
    "run_dump",
]
