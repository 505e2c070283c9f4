"""Small helpers shared by soupwrap modules.

``inspect()`` renders its payloads with :func:`stable_json_dumps`; the
round-trip checks and the CLI read and write UTF-8 files through here.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any


def stable_json_dumps(obj: object) -> str:
    """Serialize JSON in a stable, human-readable way with a trailing newline."""
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def write_text(path: Path, content: str) -> Path:
    """Write text content to a file, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def truncate(text: str, limit: int) -> str:
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit] + "..."


def warn(msg: str) -> None:
    print(msg, file=sys.stderr)


def to_jsonable(value: Any) -> Any:
    """Coerce arbitrary values into something json.dumps accepts."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_jsonable(item) for item in value]
    return repr(value)
