"""Command-line interface for soupwrap."""

import argparse
import sys
from pathlib import Path
from typing import Iterable, Optional

from .attributes import get_class_list
from .config import load_config, set_config
from .errors import SoupMishap
from .io_utils import read_text, write_text
from .nodes import change_tag_name
from .roundtrip import verify_roundtrip_files
from .select import select
from .serialize import to_html

VERSION = "0.1.0"


def _read_markup(path_value: str) -> str:
    path = Path(path_value)
    if not path.exists():
        raise SystemExit(f"File not found: {path}")
    return read_text(path)


def _handle_roundtrip(args: argparse.Namespace) -> None:
    paths = [Path(value) for value in args.files]
    missing = [str(path) for path in paths if not path.exists()]
    if missing:
        raise SystemExit(f"File not found: {', '.join(missing)}")

    ok, errors = verify_roundtrip_files(paths)
    for diff in errors:
        print(diff, file=sys.stderr)
    if not ok:
        raise SystemExit(1)
    print(f"{len(paths)} file(s) round-trip unchanged.")


def _handle_query(args: argparse.Namespace) -> None:
    selection = select(_read_markup(args.file))
    if args.first:
        found = selection.find_first(args.selector)
        matches = [found] if found is not None else []
    else:
        matches = selection.find_all(args.selector)

    if not matches:
        print(f"No elements match {args.selector!r}.", file=sys.stderr)
        raise SystemExit(1)
    for element in matches:
        print(to_html(element))


def _handle_retag(args: argparse.Namespace) -> None:
    output = (
        select(_read_markup(args.file))
        .update_all(args.selector)(change_tag_name(args.tag))
        .to_container()
    )
    if args.out:
        write_text(Path(args.out), output)
    else:
        sys.stdout.write(output)


def _handle_classes(args: argparse.Namespace) -> None:
    selection = select(_read_markup(args.file))
    elements = selection.find_all(args.selector)
    for element in elements:
        classes = get_class_list(element)
        print(f"<{element.name}>: {' '.join(classes) if classes else '(none)'}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="soupwrap",
        description="Query, rewrite and round-trip HTML fragments",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"soupwrap {VERSION}",
        help="Show the soupwrap version and exit.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with parser/serializer settings.",
    )

    subparsers = parser.add_subparsers(dest="command")

    roundtrip_parser = subparsers.add_parser(
        "roundtrip",
        help="Check that files serialize back to exactly the same text",
    )
    roundtrip_parser.add_argument("files", nargs="+", help="HTML files to verify.")
    roundtrip_parser.set_defaults(func=_handle_roundtrip)

    query_parser = subparsers.add_parser("query", help="Print the elements matching a selector")
    query_parser.add_argument("file", help="HTML file to query.")
    query_parser.add_argument("selector", help="CSS selector.")
    query_parser.add_argument(
        "--first",
        action="store_true",
        help="Only print the first match.",
    )
    query_parser.set_defaults(func=_handle_query)

    retag_parser = subparsers.add_parser("retag", help="Rename every element matching a selector")
    retag_parser.add_argument("file", help="HTML file to rewrite.")
    retag_parser.add_argument("selector", help="CSS selector.")
    retag_parser.add_argument("tag", help="New tag name.")
    retag_parser.add_argument(
        "--out",
        default=None,
        help="Write the result here instead of stdout.",
    )
    retag_parser.set_defaults(func=_handle_retag)

    classes_parser = subparsers.add_parser("classes", help="List the classes of matching elements")
    classes_parser.add_argument("file", help="HTML file to inspect.")
    classes_parser.add_argument(
        "selector",
        nargs="?",
        default=None,
        help="CSS selector (defaults to the top-level elements).",
    )
    classes_parser.set_defaults(func=_handle_classes)

    return parser


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.config is not None:
        try:
            set_config(load_config(args.config))
        except (OSError, ValueError) as exc:
            raise SystemExit(str(exc)) from exc

    if not hasattr(args, "func"):
        parser.print_help()
        return
    try:
        args.func(args)
    except SoupMishap as exc:
        raise SystemExit(str(exc)) from exc


__all__ = ["build_parser", "main"]


if __name__ == "__main__":
    main()
