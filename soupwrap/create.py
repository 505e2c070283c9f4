"""Construction of fresh containers.

This is the only module that mints new trees. Moving a node from one tree
into another always goes through :func:`create_fragment`, which clones the
node into a new, isolated BeautifulSoup tree first.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Optional, Union

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag

from .config import get_config
from .errors import SoupMishap
from .guards import (
    document_body,
    get_node_type,
    is_element,
    is_element_like,
    is_text_node_like,
)
from .io_utils import warn
from .serialize import parse_html
from .solver import solve_for_node_type
from .types_dom import Container, HTML

DOCUMENT_TEMPLATE = "<html><head>{head}</head><body>{body}</body></html>"


def create_document(body: HTML, head: Optional[HTML] = None) -> BeautifulSoup:
    """Build a full document with ``body`` (and optionally ``head``) markup."""
    return parse_html(DOCUMENT_TEMPLATE.format(head=head or "", body=body or ""))


def clone(container: Any) -> Any:
    """Deep copy of any container; the copy belongs to no tree."""
    if get_node_type(container) == "html":
        return container
    if isinstance(container, BeautifulSoup):
        return create_fragment(container)
    if isinstance(container, PageElement):
        return copy.copy(container)
    raise SoupMishap(
        f"clone() can not copy a value of type {type(container).__name__}.",
        name="clone()",
    )


def create_fragment(content: Optional[Union[Container, HTML]] = None) -> BeautifulSoup:
    """Open a fresh tree and clone ``content`` (markup or any node) into it."""
    if content is None or isinstance(content, str) and not isinstance(content, PageElement):
        return parse_html(content)

    fragment = parse_html()
    if isinstance(content, BeautifulSoup):
        # documents and fragments alike bring their whole top level along
        for child in content.contents:
            fragment.append(copy.copy(child))
    elif isinstance(content, PageElement):
        fragment.append(copy.copy(content))
    else:
        raise SoupMishap(
            f"create_fragment() received an unsupported value of type {type(content).__name__}.",
            name="create_fragment()",
            inspect=("content", content),
        )
    return fragment


def adopt(node: PageElement) -> PageElement:
    """Clone ``node`` through a fresh fragment so it can be inserted into any tree."""
    fragment = create_fragment(node)
    return fragment.contents[0].extract()


def create_tag(name: str, attrs: Optional[Dict[str, str]] = None) -> Tag:
    """A new, detached element named ``name``."""
    return parse_html().new_tag(name, attrs=dict(attrs or {}))


def _only_element(container: BeautifulSoup) -> Tag:
    root = document_body(container) or container
    return next(node for node in root.contents if is_element(node))


def _attach(element: Tag, parent: Optional[Tag]) -> Tag:
    if parent is None:
        return element.extract()
    parent.append(adopt(element))
    return parent.contents[-1]


def create_element(content: Union[Container, HTML], parent: Optional[Tag] = None) -> Tag:
    """Derive a single element from markup or a container.

    With ``parent`` the element is appended as the parent's last child and
    the attached node is returned. Without one the result is always a new,
    detached node, even when ``content`` is already an element.
    """

    def from_node(node: PageElement) -> Tag:
        raise SoupMishap(
            "Can't create an element from a generic node because it has no tag name.",
            name="create_element(node)",
            inspect=("node", node),
        )

    def from_html(html: HTML) -> Tag:
        fragment = create_fragment(html)
        if not is_element_like(fragment):
            raise SoupMishap(
                f'The HTML passed into create_element() is not convertible to a single element: "{html}"',
                name="create_element(html)",
                inspect=("fragment", fragment),
            )
        return _attach(_only_element(fragment), parent)

    def from_element(element: Tag) -> Tag:
        if parent is None:
            return adopt(element)
        return _attach(element, parent)

    def from_text(text: NavigableString) -> Tag:
        raise SoupMishap(
            "An element can not be created from a text node because elements require a tag name.",
            name="create_element(text)",
            inspect=("text", text),
        )

    def from_fragment(fragment: BeautifulSoup) -> Tag:
        if not is_element_like(fragment):
            raise SoupMishap(
                "Can not create an element from a fragment that does not hold exactly one element.",
                name="create_element(fragment)",
                inspect=("fragment", fragment),
            )
        return _attach(copy.copy(_only_element(fragment)), parent)

    def from_document(document: BeautifulSoup) -> Tag:
        if parent is not None:
            raise SoupMishap(
                "A document and a parent element were passed into create_element(); "
                "this is not a valid combination.",
                name="create_element(document)",
            )
        if not is_element_like(document):
            raise SoupMishap(
                "Can not create an element from a document whose body does not hold exactly one element.",
                name="create_element(document)",
                inspect=("document", document),
            )
        return copy.copy(_only_element(document))

    return (
        solve_for_node_type()
        .output_type(Tag)
        .solver(
            label="create_element()",
            node=from_node,
            html=from_html,
            element=from_element,
            text=from_text,
            fragment=from_fragment,
            document=from_document,
        )
    )(content)


create_element_node = create_element


def create_text_node(text: Optional[str] = None) -> NavigableString:
    """A detached text node holding ``text``.

    Empty input is almost certainly a mistake by the caller, but it is not
    fatal: a warning is printed and an empty text node returned.
    """
    if not text:
        if get_config().warn_on_empty_text:
            warn("An empty string was passed into create_text_node(); will be ignored but probably a mistake")
        return NavigableString("")

    fragment = create_fragment(text)
    if not is_text_node_like(fragment):
        raise SoupMishap(
            f'The HTML passed in cannot be converted to a single text node: "{text}".',
            name="create_text_node(text)",
            inspect=("fragment", fragment),
        )
    return fragment.contents[0].extract()


def create_node(content: Union[Container, HTML]) -> Union[Tag, NavigableString]:
    """An element or a text node, whichever ``content`` amounts to."""
    fragment = create_fragment(content)
    if is_element_like(fragment):
        return _only_element(fragment).extract()
    if is_text_node_like(fragment):
        return fragment.contents[0].extract()
    raise SoupMishap(
        "create_node() couldn't convert its input to an element or a text node.",
        name="create_node()",
        inspect=("content", content),
    )


__all__ = [
    "adopt",
    "clone",
    "create_document",
    "create_element",
    "create_element_node",
    "create_fragment",
    "create_node",
    "create_tag",
    "create_text_node",
]
