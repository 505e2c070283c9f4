"""Chainable query and update handle over a single root container.

``select(html).update_all(".line")(change_tag_name("div")).to_container()``

A :class:`NodeSelector` is a small frozen value. Every intermediate call
returns a new handle over the same root, and the root itself is updated in
place by ``update``, ``update_all`` and ``filter``. When HTML text was
selected the root is a private fragment and ``to_container()`` hands back
text again.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from inspect import Parameter, signature
from typing import Any, Callable, List, Optional, Union

from bs4 import BeautifulSoup, Tag

from .create import adopt, clone, create_fragment
from .diagnostics import describe
from .errors import SoupMishap
from .guards import get_node_type, is_element, is_html
from .nodes import content_root, get_child_elements
from .serialize import to_html
from .types_dom import HTML, MapCallback, NodeType, UpdateCallback

SelectRoot = Union[BeautifulSoup, Tag]


def _positional_arity(callback: Callable[..., Any]) -> int:
    """How many of ``(element, idx, total)`` the callback takes positionally."""
    try:
        params = signature(callback).parameters.values()
    except (TypeError, ValueError):
        return 1
    positional = 0
    for param in params:
        if param.kind == Parameter.VAR_POSITIONAL:
            return 3
        if param.kind in (Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    return max(1, min(positional, 3))


def _invoke(callback: UpdateCallback, element: Tag, idx: int, total: int) -> Any:
    return callback(*(element, idx, total)[: _positional_arity(callback)])


@dataclass(frozen=True)
class NodeSelector:
    root: SelectRoot
    origin_is_html: bool = False

    def type(self) -> NodeType:
        return "html" if self.origin_is_html else get_node_type(self.root)

    def find_first(self, sel: str, error_message: Optional[str] = None) -> Optional[Tag]:
        """First descendant matching ``sel``; None unless ``error_message`` demands a match."""
        result = self.root.select_one(sel)
        if result is None and error_message:
            raise SoupMishap(
                error_message,
                name=f"select.find_first({sel})",
                inspect=("root", self.root),
            )
        return result

    def find_all(self, sel: Optional[str] = None) -> List[Tag]:
        """Every descendant matching ``sel``, or the root's child elements without one."""
        if sel:
            return list(self.root.select(sel))
        return get_child_elements(self.root)

    def _sole_element(self) -> Tag:
        if is_element(self.root):
            return self.root
        elements = [child for child in content_root(self.root).contents if is_element(child)]
        if not elements:
            raise SoupMishap(
                "Performing an update on a root selection which has no element to update is not allowed!",
                name="update()",
                inspect=("root", self.root),
            )
        if len(elements) > 1:
            raise SoupMishap(
                f"Performing an update on a {self.type()} which has more than a single element as a child "
                "is ambiguous! Try either update_all() or use a selector.",
                name="update()",
                inspect=("root", self.root),
            )
        return elements[0]

    def _apply(self, target: Tag, copied: Tag, result: Any, context: str) -> "NodeSelector":
        """Write a callback's result back over ``target``."""
        if result is None:
            result = copied
        if is_element(result):
            if result is target:
                return replace(self)
            if result.parent is not None:
                result = adopt(result)
            if target.parent is not None:
                target.replace_with(result)
            if target is self.root:
                return replace(self, root=result)
            return replace(self)
        if result is False:
            target.extract()
            if target is self.root:
                return replace(self, root=create_fragment())
            return replace(self)
        raise SoupMishap(
            f"The return value from {context} was invalid! Valid return values are an element, "
            f"False or None but instead got: {type(result).__name__}.",
            name=f"select({self.type()}) -> invalid return value",
            inspect=("target", target),
        )

    def update(self, sel: Optional[str] = None, error_if_not_found: Union[bool, str] = False):
        """Mutate the first match of ``sel`` (or the root's single element).

        The callback gets a clone. Return an element to replace the target,
        False to remove it, or None to keep the mutated clone. A missing
        target is a no-op unless ``error_if_not_found`` is True or a message.
        """

        def apply(callback: UpdateCallback) -> NodeSelector:
            target = self.root.select_one(sel) if sel else self._sole_element()
            if target is None:
                if error_if_not_found:
                    message = (
                        error_if_not_found
                        if isinstance(error_if_not_found, str)
                        else f'The selection "{sel}" was not found so the update() operation wasn\'t able to be run'
                    )
                    raise SoupMishap(
                        message,
                        name=f"select({sel}).update(sel)",
                        inspect=[("parent node", self.root)],
                    )
                return replace(self)

            copied = clone(target)
            result = _invoke(callback, copied, 0, 1)
            return self._apply(target, copied, result, f"select({self.type()}).update({sel})")

        return apply

    def update_all(self, sel: Optional[str] = None):
        """Run the callback over every match; it may take ``(el, idx, total)``."""

        def apply(callback: UpdateCallback) -> NodeSelector:
            elements = self.find_all(sel)
            total = len(elements)
            handle = self
            for idx, element in enumerate(elements):
                copied = clone(element)
                try:
                    result = _invoke(callback, copied, idx, total)
                except Exception as exc:
                    raise SoupMishap(
                        f"update_all(): the callback passed to select(container).update_all('{sel}') failed "
                        f"while running:\n\n\tmutate({describe(element)}, {idx} idx, {total} elements)",
                        error=exc,
                        name=f"select({self.type()}).update_all({sel})",
                    ) from exc
                handle = handle._apply(
                    element,
                    copied,
                    result,
                    f"select(container).update_all('{sel}')({describe(element)}, {idx} idx, {total} elements)",
                )
            return handle

        return apply

    def map_all(self, sel: Optional[str] = None):
        """Project clones of every match through the callback; the root is left alone."""

        def apply(callback: MapCallback) -> List[Any]:
            return [callback(clone(element)) for element in self.find_all(sel)]

        return apply

    def filter(self, sel: str) -> "NodeSelector":
        for element in self.root.select(sel):
            element.extract()
        return replace(self)

    def to_container(self) -> Union[SelectRoot, HTML]:
        return to_html(self.root) if self.origin_is_html else self.root


def select(container: Any) -> NodeSelector:
    """Bind a query handle to HTML text, a document, a fragment or an element."""
    if is_html(container):
        return NodeSelector(root=create_fragment(container), origin_is_html=True)
    if get_node_type(container) in ("document", "fragment", "element"):
        return NodeSelector(root=container)
    raise SoupMishap(
        f"Attempt to select() an invalid node type: {get_node_type(container)}",
        name="select(node)",
        inspect=("node", container),
    )


__all__ = ["NodeSelector", "select"]
