"""Round-trip verification: parse markup and check it serializes back unchanged."""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .config import SoupConfig
from .io_utils import read_text
from .serialize import parse_html, to_html


def roundtrip(markup: str, config: Optional[SoupConfig] = None) -> str:
    return to_html(parse_html(markup, config), config)


def roundtrip_diff(markup: str, label: str = "input", config: Optional[SoupConfig] = None) -> str:
    """Unified diff between ``markup`` and its re-serialized form ('' when identical)."""
    restored = roundtrip(markup, config)
    if restored == markup:
        return ""
    diff = difflib.unified_diff(
        markup.splitlines(keepends=True),
        restored.splitlines(keepends=True),
        fromfile=f"original/{label}",
        tofile=f"roundtrip/{label}",
    )
    return "".join(diff)


def verify_roundtrip(markup: str, config: Optional[SoupConfig] = None) -> bool:
    return roundtrip(markup, config) == markup


def verify_roundtrip_files(
    paths: Iterable[Path], config: Optional[SoupConfig] = None
) -> Tuple[bool, List[str]]:
    errors: List[str] = []
    for path in paths:
        diff = roundtrip_diff(read_text(path), label=path.name, config=config)
        if diff:
            errors.append(diff)
    return not errors, errors


__all__ = ["roundtrip", "roundtrip_diff", "verify_roundtrip", "verify_roundtrip_files"]
