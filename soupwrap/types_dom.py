"""Container type definitions."""

from __future__ import annotations

from typing import Any, Callable, List, Literal, Optional, Tuple, TypedDict, Union

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag

NodeType = Literal["html", "document", "fragment", "element", "text", "node"]

NODE_TYPES: Tuple[NodeType, ...] = ("html", "document", "fragment", "element", "text", "node")

HTML = str

# Documents and fragments are both BeautifulSoup trees; the classifier tells them apart.
DocRoot = BeautifulSoup
DomNode = Union[Tag, NavigableString, PageElement]
Container = Union[DocRoot, DomNode]
ContainerOrHtml = Union[Container, HTML]

# An update callback returns the replacement element, False to remove the
# target, or None to keep the (possibly mutated) clone it was handed.
UpdateResult = Union[Tag, Literal[False], None]
UpdateCallback = Callable[..., UpdateResult]
MapCallback = Callable[[Tag], Any]


class TreeSummary(TypedDict):
    node: str
    children: List["TreeSummary"]


class NodeSummary(TypedDict, total=False):
    type: NodeType
    tag: str
    classes: List[str]
    html: str
    text: str
    children: List["NodeSummary"]
    value: Optional[str]
