"""Text to tree parsing and tree to text serialization."""

from __future__ import annotations

from typing import Any, Optional

from bs4 import BeautifulSoup, Doctype, NavigableString, PageElement, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from .config import SoupConfig, get_config
from .errors import SoupMishap

PARSER = "html.parser"
# BeautifulSoup pushes its root tag (named "[document]") onto the parse stack,
# so listing it here keeps whitespace-only strings at every depth.
ROOT_TAG_NAME = BeautifulSoup.ROOT_TAG_NAME
DEFAULT_PRESERVE_TAGS = frozenset({"pre", "textarea"})


class InlineDoctype(Doctype):
    """A doctype that does not append a newline of its own when serialized."""

    SUFFIX = ">"


def _preserve_tags(config: SoupConfig) -> set:
    if config.preserve_whitespace:
        return set(DEFAULT_PRESERVE_TAGS | {ROOT_TAG_NAME})
    return set(DEFAULT_PRESERVE_TAGS)


def parse_html(markup: Optional[str] = None, config: Optional[SoupConfig] = None) -> BeautifulSoup:
    """Parse markup into a fresh BeautifulSoup tree without normalizing it."""
    config = config or get_config()
    return BeautifulSoup(
        markup or "",
        PARSER,
        preserve_whitespace_tags=_preserve_tags(config),
        multi_valued_attributes=None,
        element_classes={Doctype: InlineDoctype},
    )


class SourceOrderFormatter(HTMLFormatter):
    """Keeps attributes in source order and always quotes them with ``"``."""

    def attributes(self, tag):
        if tag.attrs is None:
            return []
        return list(tag.attrs.items())

    def quoted_attribute_value(self, value: str) -> str:
        return '"' + value.replace('"', "&quot;") + '"'


def formatter(config: Optional[SoupConfig] = None) -> HTMLFormatter:
    """Formatter that escapes only &, < and > so unmodified markup reproduces."""
    config = config or get_config()
    return SourceOrderFormatter(
        entity_substitution=EntitySubstitution.substitute_xml,
        void_element_close_prefix=config.void_element_close,
    )


def to_html(container: Any, config: Optional[SoupConfig] = None) -> str:
    """Serialize any container (or pass HTML text through untouched)."""
    if isinstance(container, str) and not isinstance(container, PageElement):
        return container
    if isinstance(container, Tag):
        # BeautifulSoup is a Tag too; its root is hidden so only contents render.
        return container.decode(formatter=formatter(config))
    if isinstance(container, NavigableString):
        return container.output_ready(formatter(config))
    raise SoupMishap(
        f"Unable to serialize a value of type {type(container).__name__} to HTML.",
        name="to_html()",
    )


def inner_html(container: Any, config: Optional[SoupConfig] = None) -> str:
    """Serialize only the children of an element, fragment or document."""
    if isinstance(container, Tag):
        return container.decode_contents(formatter=formatter(config))
    return to_html(container, config)


__all__ = ["PARSER", "SourceOrderFormatter", "formatter", "inner_html", "parse_html", "to_html"]
