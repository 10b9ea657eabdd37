"""Stub generation skill.

Public API
----------
- collect(root) -> Collection
- render_stub(collection, source_path, stub_name) -> str
- generate(clang_args, *, stub_name=None, library_file=None, diagnostics_stream=None) -> dict
"""

from __future__ import annotations

from typing import Any, TextIO

from stubfactory.clang_ast import check_diagnostics, parse_translation_unit
from stubfactory.errors import UsageError
from stubfactory.lang import detect_language
from stubfactory.skills.stub.collector import collect
from stubfactory.skills.stub.emitter import derive_stub_name, render_stub
from stubfactory.skills.stub.model import (  # noqa: F401
    Collection,
    DeclarationRecord,
    Parameter,
)


def generate(
    clang_args: list[str],
    *,
    stub_name: str | None = None,
    library_file: str | None = None,
    diagnostics_stream: TextIO | None = None,
) -> dict[str, Any]:
    """Parse a compilation unit and generate its stub source.

    Args:
        clang_args: Compiler arguments for the file to stub, source path included
        stub_name: Prefix for free-function variables and the reset routine
                   (derived from the source file name if None)
        library_file: Explicit libclang shared library to load
        diagnostics_stream: Where parser diagnostics are printed (stderr if None)

    Returns:
        Dict with keys:
        - stub_name: Name used for free-function variables and the reset routine
        - source_path: Main file of the compilation unit
        - language: "c" or "cpp"
        - namespaces: Namespace spellings in declaration order
        - declarations: One dict per stubbed function or method
        - source: The generated stub source
        - stats: Counts of declarations, methods and output lines

    Raises:
        UsageError: If no compiler arguments were given
        ParseError: If the compilation unit could not be parsed
        DiagnosticError: If the parser reported errors
    """
    if not clang_args:
        raise UsageError()

    unit = parse_translation_unit(clang_args, library_file=library_file)

    # Drain and print every diagnostic before deciding to abort
    check_diagnostics(unit.diagnostics, diagnostics_stream)

    collection = collect(unit.root)

    if stub_name is None:
        stub_name = derive_stub_name(unit.source_path)

    source = render_stub(collection, unit.source_path, stub_name)

    return {
        "stub_name": stub_name,
        "source_path": unit.source_path,
        "language": detect_language(unit.source_path, clang_args),
        "namespaces": list(collection.namespaces),
        "declarations": [_declaration_dict(d) for d in collection.declarations],
        "source": source,
        "stats": {
            "declaration_count": len(collection.declarations),
            "method_count": sum(1 for d in collection.declarations if d.owner is not None),
            "namespace_count": len([ns for ns in collection.namespaces if ns]),
            "total_lines": source.count("\n"),
        },
    }


def _declaration_dict(record: DeclarationRecord) -> dict[str, Any]:
    return {
        "name": record.name,
        "owner": record.owner,
        "return_type": record.return_type,
        "returns_void": record.returns_void,
        "parameters": [{"name": p.name, "type": p.type} for p in record.parameters],
    }
