"""CLI entry point for stubfactory.

Usage: ``stubfactory [--stub-* options] <compiler arguments...>``

The compiler arguments are exactly those you would pass to compile the file
being stubbed, source path included.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from stubfactory.errors import StubFactoryError, UsageError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stubfactory",
        usage="%(prog)s [--stub-* options] <compiler arguments...>",
        description="Generate a C/C++ test stub for every function and method "
        "declared in a source file",
        allow_abbrev=False,
    )

    # --- Register skill options ---
    from stubfactory.skills.stub.cli import register as register_stub
    from stubfactory.skills.highlight.cli import register as register_highlight

    register_stub(parser)
    register_highlight(parser)

    parser.add_argument(
        "--stub-verbose",
        action="store_true",
        help="Log debug details about parsing and collection to stderr",
    )
    return parser


def _split_args(
    parser: argparse.ArgumentParser, argv: list[str]
) -> tuple[argparse.Namespace, list[str]]:
    """Separate tool options from the compiler arguments."""
    args, clang_args = parser.parse_known_args(argv)
    if clang_args and clang_args[0] == "--":
        clang_args = clang_args[1:]
    return args, clang_args


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    parser = _build_parser()
    args, clang_args = _split_args(parser, argv)

    logging.basicConfig(
        level=logging.DEBUG if args.stub_verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    from stubfactory.skills.stub.cli import run as run_stub
    from stubfactory.skills.highlight.cli import run as run_highlight

    try:
        if not clang_args:
            raise UsageError()
        result = run_stub(args, clang_args)
    except StubFactoryError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    # --- Output ---
    if args.stub_format == "json":
        text = json.dumps(result, indent=2) + "\n"
    else:
        text = result["source"]

    if args.stub_output:
        Path(args.stub_output).write_text(text, encoding="utf-8")
        return 0

    if args.stub_format == "source":
        text = run_highlight(args, text, result["language"])

    sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
