"""Attribute and class access on the top element of a container."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple, Union

from bs4 import BeautifulSoup, Tag

from .create import clone
from .errors import SoupMishap
from .guards import get_node_type
from .nodes import top_element
from .solver import solve_for_node_type
from .types_dom import Container, HTML

ClassFilter = Union[str, re.Pattern]


def get_attribute(name: str):
    """``get_attribute("href")(container) -> Optional[str]``."""

    def from_root(container: BeautifulSoup) -> Optional[str]:
        top = top_element(container)
        return top.get(name) if top is not None else None

    return (
        solve_for_node_type("text", "node")
        .output_type(str)
        .solver(
            label=f"get_attribute({name})",
            fragment=from_root,
            document=from_root,
            element=lambda el: el.get(name),
        )
    )


def _attribute_writer(label: str, change: Callable[[Tag], None]):
    """Mirror solver applying ``change`` to the top element of a copy."""

    def on_root(container: BeautifulSoup) -> BeautifulSoup:
        copied = clone(container)
        top = top_element(copied)
        if top is None:
            raise SoupMishap(
                f"{label} needs an element but the {get_node_type(container)} has none.",
                name=label,
                inspect=("container", container),
            )
        change(top)
        return copied

    def on_element(element: Tag) -> Tag:
        copied = clone(element)
        change(copied)
        return copied

    def invalid(node: Any) -> Any:
        raise SoupMishap(
            f'You can not use the {label} utility on a node of type: "{get_node_type(node)}"',
            name=f"{label}(INVALID)",
            inspect=("node", node),
        )

    return (
        solve_for_node_type()
        .mirror()
        .solver(
            label=label,
            fragment=on_root,
            document=on_root,
            element=on_element,
            text=invalid,
            node=invalid,
        )
    )


def set_attribute(name: str, value: str):
    """``set_attribute("id", "main")(container)`` returns an updated copy."""

    def change(tag: Tag) -> None:
        tag[name] = value

    return _attribute_writer(f"set_attribute({name})", change)


def remove_attribute(name: str):
    def change(tag: Tag) -> None:
        if name in tag.attrs:
            del tag[name]

    return _attribute_writer(f"remove_attribute({name})", change)


def _split_classes(value: Any) -> List[str]:
    if isinstance(value, list):
        # trees parsed elsewhere may keep class as a list
        value = " ".join(value)
    tokens: List[str] = []
    for token in (value or "").split():
        if token not in tokens:
            tokens.append(token)
    return tokens


def get_class_list(container: Optional[Union[Container, HTML]]) -> List[str]:
    """Classes on the top element, de-duplicated in document order."""
    if container is None:
        return []
    return _split_classes(get_attribute("class")(container))


def _flatten_classes(classes: Tuple[Any, ...]) -> List[str]:
    tokens: List[str] = []
    for item in classes:
        if isinstance(item, (list, tuple)):
            tokens.extend(_flatten_classes(tuple(item)))
        elif item:
            tokens.extend(str(item).split())
    return tokens


def add_class(*classes: Union[str, List[Any]]):
    """Append classes to the top element; existing classes keep their place."""

    def apply(container: Any) -> Any:
        current = get_class_list(container)
        for token in _flatten_classes(classes):
            if token not in current:
                current.append(token)
        return set_attribute("class", " ".join(current))(container)

    return apply


def remove_class(*classes: Union[str, List[Any]]):
    """Drop classes from the top element; classes that are absent are ignored.

    When nothing is left the ``class`` attribute is removed entirely.
    """

    def apply(container: Any) -> Any:
        current = get_class_list(container)
        unwanted = set(_flatten_classes(classes))
        remaining = [token for token in current if token not in unwanted]
        if remaining == current:
            return clone(container)
        if not remaining:
            return remove_attribute("class")(container)
        return set_attribute("class", " ".join(remaining))(container)

    return apply


@dataclass(frozen=True)
class ClassFilterResult:
    container: Any
    matched: List[str]


def _matches(filter_: ClassFilter, klass: str) -> bool:
    if isinstance(filter_, str):
        return filter_ == klass
    return filter_.search(klass) is not None


def filter_classes(*filters: ClassFilter):
    """Collect the classes of the top element that match any filter.

    Filters are exact class names or compiled patterns (``re.compile``). This
    is a read: the container comes back untouched next to the matches.
    """
    for filter_ in filters:
        if not isinstance(filter_, (str, re.Pattern)):
            raise SoupMishap(
                f"filter_classes() filters must be strings or compiled patterns, not {type(filter_).__name__}.",
                name="filter_classes()",
            )

    def apply(container: Any) -> ClassFilterResult:
        matched = [
            klass
            for klass in get_class_list(container)
            if any(_matches(filter_, klass) for filter_ in filters)
        ]
        return ClassFilterResult(container=container, matched=matched)

    return apply


__all__ = [
    "ClassFilterResult",
    "add_class",
    "filter_classes",
    "get_attribute",
    "get_class_list",
    "remove_attribute",
    "remove_class",
    "set_attribute",
]
