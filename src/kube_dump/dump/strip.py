"""Named in-place transforms applied to object representations before they are written."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

StripFunc = Callable[[dict[str, Any]], None]

_REGISTRY: dict[str, StripFunc] = {}


@dataclass(frozen=True)
class Strip:
    """A strip operation resolved from the registry."""

    name: str
    func: StripFunc

    def __call__(self, obj: dict[str, Any]) -> None:
        self.func(obj)


def register_strip(name: str) -> Callable[[StripFunc], StripFunc]:
    """Register a strip operation under ``name``."""

    def decorator(func: StripFunc) -> StripFunc:
        if name in _REGISTRY:
            raise ValueError(f"strip operation already registered: {name}")
        _REGISTRY[name] = func
        return func

    return decorator


def available_strips() -> list[str]:
    return sorted(_REGISTRY)


def parse_strips(names: Iterable[str]) -> list[Strip]:
    """
    Resolve strip names to operations, keeping the first occurrence of each name.
    Raises ValueError for names that are not registered.
    """
    strips: list[Strip] = []
    seen: set[str] = set()
    for name in names:
        if name in seen:
            continue
        func = _REGISTRY.get(name)
        if func is None:
            raise ValueError(
                f"unknown strip request: {name} (supported: {', '.join(available_strips())})"
            )
        seen.add(name)
        strips.append(Strip(name=name, func=func))
    return strips


def apply_strips(obj: dict[str, Any], strips: Iterable[Strip]) -> None:
    """Apply every strip to ``obj`` in order, mutating it in place."""
    for strip in strips:
        strip(obj)


@register_strip("managed-fields")
def _strip_managed_fields(obj: dict[str, Any]) -> None:
    # Key is kept with a null value; consumers may expect it to be present.
    metadata = obj.get("metadata")
    if isinstance(metadata, dict) and "managedFields" in metadata:
        metadata["managedFields"] = None
