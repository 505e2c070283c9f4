"""The single error type raised by soupwrap operations."""

from __future__ import annotations

from typing import Any, List, Optional

ERROR_KIND = "SoupWrapper"


def _is_inspection_tuple(item: Any) -> bool:
    return isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], str)


class SoupMishap(Exception):
    """Raised for every failure detected while working with containers.

    Covers invalid variants for an operation, required selector matches that
    were not found, ambiguous targets and callbacks that break their return
    contract. ``error`` wraps an underlying exception (its message is appended
    and its name recorded in ``trace``); ``inspect`` is one ``(label, value)``
    tuple, a list of them, or bare values rendered as JSON summaries.
    """

    kind = ERROR_KIND

    def __init__(
        self,
        message: str,
        *,
        error: Optional[BaseException] = None,
        inspect: Any = None,
        name: Optional[str] = None,
    ) -> None:
        self.name = f"{ERROR_KIND}::{name}" if name else ERROR_KIND
        self.trace: List[str] = []

        if isinstance(error, SoupMishap):
            inner = error.name.replace(f"{ERROR_KIND}::", "")
            self.name = f"{ERROR_KIND}::{name or inner}"
            self.trace = list(error.trace)

        if error is not None:
            underlying = (
                error.name.replace(f"{ERROR_KIND}::", "")
                if isinstance(error, SoupMishap)
                else type(error).__name__
            )
            detail = error.message if isinstance(error, SoupMishap) else str(error)
            message = (
                f"{message}\n\nThe underlying error message [{underlying}] was:\n{detail}"
            )
            self.trace.append(underlying)
            self.__cause__ = error
        elif inspect is not None:
            message = message + self._render_inspections(inspect)

        if len(self.trace) > 1:
            steps = ", ".join(f"{idx}. {step}" for idx, step in enumerate(self.trace))
            message = f"{message}\n\nTrace: {steps}"

        self.message = message
        super().__init__(message)

    @staticmethod
    def _render_inspections(payload: Any) -> str:
        # diagnostics imports the serializer, which raises SoupMishap itself
        from .diagnostics import inspect as summarize
        from .io_utils import stable_json_dumps

        if _is_inspection_tuple(payload):
            items = [payload]
        elif isinstance(payload, list):
            items = payload
        else:
            items = [payload]

        rendered: List[str] = []
        for idx, item in enumerate(items):
            if _is_inspection_tuple(item):
                intro, value = f"{item[0]}", item[1]
            else:
                intro, value = f"[{idx}]", item
            rendered.append(f"\n\n{intro}:\n{stable_json_dumps(summarize(value)).rstrip()}")
        return "".join(rendered)

    def __str__(self) -> str:
        return f"[{self.name}] {self.message}"


__all__ = ["ERROR_KIND", "SoupMishap"]
