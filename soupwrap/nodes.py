"""Structural primitives: children, renaming, insertion and wrapping.

Everything here is copy on write. The exceptions are ``replace_element``,
``before``/``after`` on an element that has a parent, and
``change_tag_name`` on an attached element: these update the parent in
place, since keeping the position among siblings is their whole purpose.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable, List, Optional, Union

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag

from .create import adopt, clone, create_element, create_fragment, create_tag
from .errors import SoupMishap
from .guards import (
    document_body,
    get_node_type,
    is_element,
    is_fragment,
    is_html,
    is_text_node,
    is_text_node_like,
)
from .serialize import parse_html, to_html
from .solver import solve_for_node_type
from .types_dom import Container, ContainerOrHtml, HTML


def content_root(container: Union[BeautifulSoup, Tag]) -> Tag:
    """The node whose children are a container's content (``<body>`` for documents)."""
    body = document_body(container)
    return body if body is not None else container


def _checked_children(root: Tag) -> List[Union[Tag, NavigableString]]:
    output: List[Union[Tag, NavigableString]] = []
    for child in root.contents:
        if not (is_element(child) or is_text_node(child)):
            raise SoupMishap(
                "Unknown node type found while collecting the children of a container.",
                name="get_children()",
                inspect=("child", child),
            )
        output.append(child)
    return output


_children_solver = (
    solve_for_node_type()
    .output_type(list)
    .solver(
        label="get_children()",
        document=lambda doc: _checked_children(content_root(doc)),
        fragment=_checked_children,
        element=_checked_children,
        text=lambda _text: [],
    )
)


def get_children(container: Any) -> List[Union[Tag, NavigableString]]:
    """Element and text children of a container; comments and the like raise."""
    return _children_solver(container)


def get_child_elements(container: Container) -> List[Tag]:
    return [child for child in get_children(container) if is_element(child)]


def _first_element(root: Tag) -> Optional[Tag]:
    return next((child for child in root.contents if is_element(child)), None)


_top_element_solver = (
    solve_for_node_type("text", "node")
    .output_type(Tag)
    .solver(
        label="top_element()",
        document=lambda doc: _first_element(content_root(doc)),
        fragment=_first_element,
        element=lambda el: el,
    )
)


def top_element(container: Any) -> Optional[Tag]:
    """The element that is the subject of a container, or None when it has none."""
    return _top_element_solver(container)


def _content_nodes(content: Any) -> List[PageElement]:
    """Clone ``content`` (markup, a node, or a list of them) into detached nodes."""
    if isinstance(content, (list, tuple)):
        return [node for item in content for node in _content_nodes(item)]
    fragment = create_fragment(content)
    return [node.extract() for node in list(fragment.contents)]


def _flatten(items: Iterable[Any]) -> List[Any]:
    flat: List[Any] = []
    for item in items:
        if isinstance(item, (list, tuple)):
            flat.extend(_flatten(item))
        else:
            flat.append(item)
    return flat


def replace_element(old: Tag):
    """Replace ``old`` inside its parent with the element given to the returned function.

    The position of ``old`` is found by comparing serialized HTML with each of
    the parent's element children; when two siblings render identically the
    first one is replaced. A detached ``old`` leaves nothing to update, so the
    new element is simply returned.
    """

    def replace(new: Union[Tag, HTML]) -> Tag:
        new_el = create_element(new) if is_html(new) else new
        if not is_element(new_el):
            raise SoupMishap(
                f"replace_element() expects an element or HTML as the replacement, not '{get_node_type(new)}'.",
                name="replace_element()",
                inspect=("replacement", new),
            )
        parent = old.parent
        if parent is None:
            return new_el

        if new_el.parent is not None:
            new_el = adopt(new_el)
        old_html = to_html(old)
        for child in [c for c in parent.contents if is_element(c)]:
            if to_html(child) == old_html:
                child.replace_with(new_el)
                break
        return new_el

    return replace


def _same_name(current: str, wanted: str) -> bool:
    return current.lower() == wanted.lower()


def _renamed(element: Tag, tag_name: str) -> Tag:
    renamed = create_tag(tag_name, element.attrs)
    for child in element.contents:
        renamed.append(copy.copy(child))
    return renamed


def _rename_top(container: BeautifulSoup, tag_name: str, label: str) -> BeautifulSoup:
    top = top_element(container)
    if top is None:
        raise SoupMishap(
            f"The {label} passed into change_tag_name() has no elements as children!",
            name=f"change_tag_name({label})",
            inspect=(label, container),
        )
    if not _same_name(top.name, tag_name):
        top.replace_with(_renamed(top, tag_name))
    return container


def change_tag_name(tag_name: str):
    """Rename the top element of a container, keeping attributes and children.

    ``change_tag_name("div")("<span class='x'>hi</span>")`` gives
    ``<div class="x">hi</div>``. Same-name requests (ignoring case) return
    the input untouched.
    """

    def from_html(html: HTML) -> HTML:
        fragment = parse_html(html)
        if top_element(fragment) is not None and _same_name(top_element(fragment).name, tag_name):
            return html
        return to_html(_rename_top(fragment, tag_name, "html"))

    def from_element(element: Tag) -> Tag:
        if _same_name(element.name, tag_name):
            return element
        renamed = _renamed(element, tag_name)
        if element.parent is not None:
            element.replace_with(renamed)
        return renamed

    def invalid(node: Any) -> Any:
        raise SoupMishap(
            f"Attempt to change the tag name of a '{get_node_type(node)}' node. This is not allowed.",
            name=f"change_tag_name({get_node_type(node)})",
            inspect=("node", node),
        )

    return (
        solve_for_node_type()
        .mirror()
        .solver(
            label=f"change_tag_name({tag_name})",
            html=from_html,
            element=from_element,
            fragment=lambda f: _rename_top(clone(f), tag_name, "fragment"),
            document=lambda d: _rename_top(clone(d), tag_name, "document"),
            text=invalid,
            node=invalid,
        )
    )


def prepend(content: Union[Container, HTML]):
    """Insert ``content`` as the first child(ren) of a target's top element."""

    def into_top(container: BeautifulSoup, label: str) -> BeautifulSoup:
        copied = clone(container)
        top = top_element(copied)
        if top is None:
            raise SoupMishap(
                f"prepend() needs an element to prepend into but the {label} has none.",
                name=f"prepend({label})",
                inspect=(label, container),
            )
        for idx, node in enumerate(_content_nodes(content)):
            top.insert(idx, node)
        return copied

    def into_element(element: Tag) -> Tag:
        copied = clone(element)
        for idx, node in enumerate(_content_nodes(content)):
            copied.insert(idx, node)
        return copied

    def invalid(node: Any) -> Any:
        raise SoupMishap(
            f"prepend() requires an element to prepend into; received a '{get_node_type(node)}'.",
            name="prepend()",
            inspect=("target", node),
        )

    return (
        solve_for_node_type()
        .mirror()
        .solver(
            label="prepend()",
            element=into_element,
            fragment=lambda f: into_top(f, "fragment"),
            document=lambda d: into_top(d, "document"),
            text=invalid,
            node=invalid,
        )
    )


def before(content: Union[Container, HTML]):
    """Insert ``content`` immediately before an attached element, or at the
    start of (a copy of) a fragment."""

    def apply(target: Any) -> Any:
        nodes = _content_nodes(content)
        if is_element(target) and target.parent is not None:
            for node in nodes:
                target.insert_before(node)
            return target
        if is_fragment(target):
            copied = clone(target)
            for idx, node in enumerate(nodes):
                copied.insert(idx, node)
            return copied
        raise SoupMishap(
            "No parent element found on the element passed into before()!",
            name="before()",
            inspect=("target", target),
        )

    return apply


def after(content: Union[Container, HTML]):
    """Insert ``content`` immediately after an attached element, or at the
    end of (a copy of) a fragment."""

    def apply(target: Any) -> Any:
        nodes = _content_nodes(content)
        if is_element(target) and target.parent is not None:
            anchor = target
            for node in nodes:
                anchor.insert_after(node)
                anchor = node
            return target
        if is_fragment(target):
            copied = clone(target)
            for node in nodes:
                copied.append(node)
            return copied
        raise SoupMishap(
            "No parent element found on the element passed into after()!",
            name="after()",
            inspect=("target", target),
        )

    return apply


def into(parent: Optional[Union[Container, HTML]] = None):
    """Place content inside ``parent``; the inverse of :func:`wrap`.

    ``into(bread)(peanut, butter, jelly)``. Children (nested lists allowed)
    are serialized, concatenated and parsed once, so adjacent text runs end
    up as a single text node. When the parent already has element children
    the content goes inside the first of them. Without a parent the stitched
    fragment itself is returned. HTML parents give back HTML.
    """

    def place(*children: Union[ContainerOrHtml, List[ContainerOrHtml]]) -> Any:
        wrapped = is_html(parent)
        if parent is None or wrapped:
            target = create_fragment(parent)
        elif get_node_type(parent) in ("element", "fragment", "document"):
            target = clone(parent)
        else:
            raise SoupMishap(
                f"into() can not use a '{get_node_type(parent)}' as the parent container.",
                name="into()",
                inspect=[("parent node", parent)],
            )

        if is_text_node_like(target):
            raise SoupMishap(
                f'The wrapper node passed to into() is a text node; this is not allowed. Parent HTML: "{to_html(target)}"',
                name="into()",
                inspect=[("parent node", parent)],
            )

        markup = "".join(to_html(child) for child in _flatten(children))
        transient = create_fragment(markup)
        root = content_root(target)
        destination = _first_element(root) or root
        for node in list(transient.contents):
            destination.append(node.extract())

        return to_html(target) if wrapped else target

    return place


def wrap(*children: Union[ContainerOrHtml, List[ContainerOrHtml]]):
    """Wrap ``children`` with the parent given to the returned function; see :func:`into`."""

    def with_parent(parent: Optional[Union[Container, HTML]] = None) -> Any:
        return into(parent)(*children)

    return with_parent


class Extractor:
    """Update callback that removes each element it is handed, keeping a copy."""

    def __init__(self) -> None:
        self.extracted: List[Tag] = []

    def __call__(self, element: Tag) -> bool:
        self.extracted.append(clone(element))
        return False

    def __len__(self) -> int:
        return len(self.extracted)


def extract(sink: Optional[Extractor] = None) -> Extractor:
    return sink if sink is not None else Extractor()


def safe_string(html: HTML) -> str:
    """Text content of ``html`` with all markup stripped."""
    return parse_html(html).get_text()


__all__ = [
    "Extractor",
    "after",
    "before",
    "change_tag_name",
    "content_root",
    "extract",
    "get_child_elements",
    "get_children",
    "into",
    "prepend",
    "replace_element",
    "safe_string",
    "top_element",
    "wrap",
]
