"""Writing dump files; parent directories are always created first."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def write_json(path: Path, value: Any) -> None:
    """Write ``value`` as pretty-printed JSON."""
    write_text(path, json.dumps(value, indent=2, ensure_ascii=False) + "\n")
