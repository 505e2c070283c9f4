"""Pydantic configuration for parsing, serialization and diagnostics."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class SoupConfig(BaseModel):
    """Settings shared by the parser, the serializer and error diagnostics."""

    preserve_whitespace: bool = Field(
        True,
        description=(
            "Keep whitespace-only text runs verbatim. When false BeautifulSoup "
            "collapses them to a single space or newline."
        ),
    )
    void_element_close: Literal["", "/"] = Field(
        "",
        description="Suffix written inside void elements: '' gives <br>, '/' gives <br/>.",
    )
    warn_on_empty_text: bool = Field(
        True, description="Warn on stderr when an empty text node is requested."
    )
    inspect_html_limit: int = Field(
        200,
        gt=0,
        description="Maximum characters of HTML echoed into error inspection payloads.",
    )

    model_config = ConfigDict(extra="forbid", frozen=True)


_active = SoupConfig()


def get_config() -> SoupConfig:
    return _active


def set_config(config: SoupConfig) -> SoupConfig:
    """Install ``config`` as the active configuration and return the previous one."""
    global _active
    previous = _active
    _active = config
    return previous


def load_config(path: Path) -> SoupConfig:
    """Load and validate a YAML configuration file."""
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping of settings.")
    try:
        return SoupConfig.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration in {path}: {exc}") from exc


__all__ = ["SoupConfig", "get_config", "load_config", "set_config"]
