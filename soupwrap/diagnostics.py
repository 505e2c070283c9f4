"""Readable summaries of containers for error messages and debugging."""

from __future__ import annotations

from typing import Any, List, Union

from bs4 import BeautifulSoup, PageElement, Tag

from .config import get_config
from .guards import document_body, get_node_type, is_container
from .io_utils import stable_json_dumps, to_jsonable, truncate
from .serialize import to_html
from .types_dom import NodeSummary, TreeSummary


def _class_list(tag: Tag) -> List[str]:
    raw = tag.get("class") or ""
    if isinstance(raw, list):
        raw = " ".join(raw)
    return [token for token in raw.split() if token]


def _children_of(value: Any) -> List[PageElement]:
    body = document_body(value)
    if body is not None:
        return list(body.contents)
    if isinstance(value, Tag):
        return list(value.contents)
    return []


def describe(node: Any) -> str:
    """One line naming a node, e.g. ``<span class="line"> [2 children]``."""
    node_type = get_node_type(node)
    if node_type == "html":
        return f'html "{truncate(node, 40)}"'
    if node_type == "text":
        return f'text "{truncate(str(node), 40)}"'
    if node_type == "element":
        classes = _class_list(node)
        class_part = f' class="{" ".join(classes)}"' if classes else ""
        return f"<{node.name}{class_part}> [{len(node.contents)} children]"
    if node_type in ("document", "fragment"):
        return f"{node_type} [{len(_children_of(node))} children]"
    return f"node {type(node).__name__}"


def inspect(item: Any, to_string: bool = False) -> Union[NodeSummary, str]:
    """Summarize ``item`` as a JSON-serialisable dict (or its JSON text)."""
    summary = _summarize(item, depth=0)
    return stable_json_dumps(summary) if to_string else summary


def _summarize(item: Any, depth: int) -> NodeSummary:
    limit = get_config().inspect_html_limit
    node_type = get_node_type(item)
    summary: NodeSummary = {"type": node_type}

    if node_type == "html":
        summary["html"] = truncate(item, limit)
        return summary
    if not is_container(item):
        summary["value"] = to_jsonable(item) if not isinstance(item, PageElement) else str(item)
        return summary

    summary["html"] = truncate(to_html(item), limit)
    if node_type == "text":
        return summary

    if isinstance(item, Tag) and not isinstance(item, BeautifulSoup):
        summary["tag"] = item.name
        summary["classes"] = _class_list(item)
    summary["text"] = truncate(item.get_text(), limit)
    # one level is enough to orient the reader
    if depth == 0:
        summary["children"] = [_summarize(child, depth + 1) for child in _children_of(item)]
    return summary


def tree_summary(container: Any) -> TreeSummary:
    """Nested outline of a container; every entry is ``describe()`` of a node."""
    return {
        "node": describe(container),
        "children": [tree_summary(child) for child in _children_of(container)],
    }


__all__ = ["describe", "inspect", "tree_summary"]
