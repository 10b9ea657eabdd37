"""CLI option registration for the highlight skill."""

from __future__ import annotations

import argparse
import sys


def register(parser: argparse.ArgumentParser) -> None:
    """Register the ``--stub-color`` and ``--stub-style`` options."""
    group = parser.add_argument_group("highlight options")
    group.add_argument(
        "--stub-color",
        choices=["auto", "always", "never"],
        default="never",
        help="Syntax-highlight source output (auto: only on a terminal; default: never)",
    )
    group.add_argument(
        "--stub-style",
        default="monokai",
        help="Pygments style name (default: monokai)",
    )


def run(args: argparse.Namespace, source: str, language: str) -> str:
    """Highlight ``source`` when colour output was requested."""
    from stubfactory.skills.highlight import highlight_source

    if args.stub_color == "never":
        return source
    if args.stub_color == "auto" and not sys.stdout.isatty():
        return source
    return highlight_source(source, language, style=args.stub_style)
