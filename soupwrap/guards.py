"""Node classification and type guards.

Every dispatcher relies on :func:`get_node_type`, so it must stay pure and
total: any value at all maps to exactly one of the six container variants.
"""

from __future__ import annotations

from typing import Any, List, Optional

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag
from bs4.element import PreformattedString

from .types_dom import NodeType


def document_body(value: Any) -> Optional[Tag]:
    """Return the ``<body>`` of a document tree, or None for anything else."""
    if not isinstance(value, BeautifulSoup):
        return None
    html = value.find("html", recursive=False)
    if not isinstance(html, Tag):
        return None
    body = html.find("body", recursive=False)
    return body if isinstance(body, Tag) else None


def document_head(value: Any) -> Optional[Tag]:
    if document_body(value) is None:
        return None
    head = value.find("html", recursive=False).find("head", recursive=False)
    return head if isinstance(head, Tag) else None


def get_node_type(value: Any) -> NodeType:
    if isinstance(value, str) and not isinstance(value, PageElement):
        return "html"
    if isinstance(value, BeautifulSoup):
        return "document" if document_body(value) is not None else "fragment"
    if isinstance(value, Tag):
        return "element"
    if isinstance(value, NavigableString) and not isinstance(value, PreformattedString):
        return "text"
    return "node"


classify = get_node_type


def is_html(value: Any) -> bool:
    return get_node_type(value) == "html"


def is_document(value: Any) -> bool:
    return get_node_type(value) == "document"


def is_fragment(value: Any) -> bool:
    return get_node_type(value) == "fragment"


def is_element(value: Any) -> bool:
    return get_node_type(value) == "element"


def is_text_node(value: Any) -> bool:
    return get_node_type(value) == "text"


def is_container(value: Any) -> bool:
    return get_node_type(value) in ("document", "fragment", "element", "text")


def is_whitespace(value: Any) -> bool:
    return is_text_node(value) and not str(value).strip()


def _top_level_nodes(value: Any) -> List[PageElement]:
    if is_document(value):
        return list(document_body(value).contents)
    if isinstance(value, Tag):
        return list(value.contents)
    return []


def is_element_like(value: Any) -> bool:
    """True when a fragment/document holds exactly one element and nothing but
    whitespace around it."""
    if not (is_fragment(value) or is_document(value)):
        return False
    significant = [node for node in _top_level_nodes(value) if not is_whitespace(node)]
    return len(significant) == 1 and is_element(significant[0])


def is_text_node_like(value: Any) -> bool:
    """True when a fragment/document consists of a single text node."""
    if is_text_node(value):
        return True
    if not (is_fragment(value) or is_document(value)):
        return False
    nodes = _top_level_nodes(value)
    return len(nodes) == 1 and is_text_node(nodes[0])


def node_bounded_by_elements(value: Any) -> bool:
    nodes = _top_level_nodes(value)
    return bool(nodes) and is_element(nodes[0]) and is_element(nodes[-1])


def node_children_all_elements(value: Any) -> bool:
    nodes = _top_level_nodes(value)
    return bool(nodes) and all(is_element(node) for node in nodes)


__all__ = [
    "classify",
    "document_body",
    "document_head",
    "get_node_type",
    "is_container",
    "is_document",
    "is_element",
    "is_element_like",
    "is_fragment",
    "is_html",
    "is_text_node",
    "is_text_node_like",
    "is_whitespace",
    "node_bounded_by_elements",
    "node_children_all_elements",
]
