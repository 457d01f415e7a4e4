"""Dump layer: layout, strips, generic dumper, enrichers and event correlation."""

from kube_dump.dump.context import DumpContext, DumpStats
from kube_dump.dump.events import correlate_events
from kube_dump.dump.generic import dump
from kube_dump.dump.layout import Layout, ObjectIdentity, ObjectLayout
from kube_dump.dump.strip import Strip, apply_strips, parse_strips

__all__ = [
    "DumpContext",
    "DumpStats",
    "Layout",
    "ObjectIdentity",
    "ObjectLayout",
    "Strip",
    "apply_strips",
    "correlate_events",
    "dump",
    "parse_strips",
]
