"""CLI option registration for the stub skill."""

from __future__ import annotations

import argparse
from typing import Any


def register(parser: argparse.ArgumentParser) -> None:
    """Register the ``--stub-*`` options.

    Every option carries the ``--stub-`` prefix so that it cannot be mistaken
    for a compiler argument; all other arguments are forwarded to libclang.
    """
    group = parser.add_argument_group("stub options")
    group.add_argument(
        "--stub-name",
        default=None,
        help="Prefix for free-function variables and the reset routine "
        "(default: source file name without extension)",
    )
    group.add_argument(
        "--stub-output",
        default=None,
        help="Write the stub to this file instead of stdout",
    )
    group.add_argument(
        "--stub-format",
        choices=["source", "json"],
        default="source",
        help="Print the stub source, or a JSON summary including it (default: source)",
    )
    group.add_argument(
        "--stub-libclang",
        default=None,
        help="Path to the libclang shared library (default: $STUBFACTORY_LIBCLANG, "
        "then the bundled library)",
    )


def run(args: argparse.Namespace, clang_args: list[str]) -> dict[str, Any]:
    """Generate the stub described by ``clang_args``."""
    from stubfactory.skills.stub import generate

    return generate(
        clang_args,
        stub_name=args.stub_name,
        library_file=args.stub_libclang,
    )
