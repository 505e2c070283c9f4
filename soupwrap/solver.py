"""Exhaustive dispatch over the six container variants.

A solver is built in two steps and then applied many times::

    tag_of = (
        solve_for_node_type("text", "node")
        .output_type()
        .solver(fragment=..., document=..., element=...)
    )
    tag_of("<span>hi</span>")

Handlers are checked when the solver is built: each variant that is not
excluded needs one, except ``html`` (promoted to a fragment and served by the
``fragment`` handler) and ``node`` (which raises when reached).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Optional

from .errors import SoupMishap
from .guards import get_node_type
from .serialize import parse_html, to_html
from .types_dom import NODE_TYPES, NodeType

Handler = Callable[[Any], Any]

# Variants a handler table may leave out without excluding them.
_OPTIONAL: FrozenSet[str] = frozenset({"html", "node"})


def _check_names(names, context: str) -> None:
    unknown = sorted(set(names) - set(NODE_TYPES))
    if unknown:
        raise SoupMishap(
            f"Unknown node type(s) {unknown} passed to {context}; valid types are {list(NODE_TYPES)}.",
            name="solve_for_node_type()",
        )


@dataclass(frozen=True)
class NodeSolverReady:
    """A configured dispatcher; call it with any container or HTML string."""

    handlers: Dict[str, Handler]
    exclude: FrozenSet[str]
    mirror: bool
    label: str = "solver"

    def __call__(self, value: Any) -> Any:
        node_type = get_node_type(value)
        if node_type in self.exclude:
            raise SoupMishap(
                f"The {self.label} does not accept '{node_type}' inputs; excluded types: "
                f"{sorted(self.exclude)}.",
                name=f"{self.label}({node_type})",
                inspect=("excluded input", value),
            )

        if node_type == "html" and "html" not in self.handlers:
            fragment = parse_html(value)
            result = self._dispatch("fragment", fragment)
            return to_html(result) if self.mirror else result

        return self._dispatch(node_type, value)

    def _dispatch(self, node_type: NodeType, value: Any) -> Any:
        handler = self.handlers.get(node_type)
        if handler is None:
            raise SoupMishap(
                f"The {self.label} received an unclassifiable '{node_type}' value and has no "
                "handler for it.",
                name=f"{self.label}({node_type})",
                inspect=("unhandled input", value),
            )
        result = handler(value)
        if self.mirror:
            result_type = get_node_type(result)
            if result_type != node_type:
                raise SoupMishap(
                    f"The {self.label} is a mirror solver but its '{node_type}' handler returned "
                    f"a '{result_type}' value.",
                    name=f"{self.label}({node_type})",
                    inspect=[("input", value), ("result", result)],
                )
        return result


@dataclass(frozen=True)
class NodeSolverReceiver:
    exclude: FrozenSet[str]
    mirror: bool

    def solver(self, label: Optional[str] = None, **handlers: Handler) -> NodeSolverReady:
        """Provide the handler table, keyed by node type."""
        _check_names(handlers, "solver()")
        excluded_but_handled = sorted(set(handlers) & self.exclude)
        if excluded_but_handled:
            raise SoupMishap(
                f"Handlers were provided for excluded node types {excluded_but_handled}.",
                name="solver()",
            )

        required = [t for t in NODE_TYPES if t not in self.exclude and t not in _OPTIONAL]
        missing = [t for t in required if t not in handlers]
        if "html" not in self.exclude and "html" not in handlers and "fragment" not in handlers:
            missing.append("html")
        if missing:
            raise SoupMishap(
                f"The handler table is missing handlers for: {missing}.",
                name="solver()",
            )

        return NodeSolverReady(
            handlers=dict(handlers),
            exclude=self.exclude,
            mirror=self.mirror,
            label=label or "solver",
        )


@dataclass(frozen=True)
class NodeSolverWithExclusions:
    exclude: FrozenSet[str]

    def output_type(self, _output: Any = None) -> NodeSolverReceiver:
        """All handlers converge on one output type (documentation only)."""
        return NodeSolverReceiver(exclude=self.exclude, mirror=False)

    def mirror(self) -> NodeSolverReceiver:
        """Each handler returns the same variant it received."""
        return NodeSolverReceiver(exclude=self.exclude, mirror=True)


def solve_for_node_type(*exclude: NodeType) -> NodeSolverWithExclusions:
    """First step of the solver builder: the node types to exclude."""
    _check_names(exclude, "solve_for_node_type()")
    return NodeSolverWithExclusions(exclude=frozenset(exclude))


__all__ = [
    "NodeSolverReady",
    "NodeSolverReceiver",
    "NodeSolverWithExclusions",
    "solve_for_node_type",
]
