"""libclang interface.

Parses one compilation unit with ``clang.cindex`` and exposes its syntax tree
through a small node interface (kind, spellings, main-file membership and
children) that the stub collector walks.  Nothing outside this module touches
``clang.cindex`` directly.
"""

from __future__ import annotations

import enum
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Iterator, TextIO

from clang import cindex
from clang.cindex import CursorKind, TypeKind

from stubfactory.errors import (
    DiagnosticError,
    LibclangNotFoundError,
    ParseError,
)

logger = logging.getLogger(__name__)

LIBCLANG_ENV = "STUBFACTORY_LIBCLANG"

# clang's CXDiagnosticSeverity values
SEVERITY_IGNORED = 0
SEVERITY_NOTE = 1
SEVERITY_WARNING = 2
SEVERITY_ERROR = 3
SEVERITY_FATAL = 4

SEVERITY_LABELS = {
    SEVERITY_NOTE: "NOTE",
    SEVERITY_WARNING: "WARNING",
    SEVERITY_ERROR: "ERROR",
    SEVERITY_FATAL: "ERROR",
}


class NodeKind(enum.Enum):
    """Declaration kinds the collector distinguishes."""

    NAMESPACE = "namespace"
    CLASS = "class"
    FUNCTION = "function"
    METHOD = "method"
    PARAMETER = "parameter"
    OTHER = "other"


_KIND_MAP = {
    CursorKind.NAMESPACE: NodeKind.NAMESPACE,
    CursorKind.CLASS_DECL: NodeKind.CLASS,
    CursorKind.STRUCT_DECL: NodeKind.CLASS,
    CursorKind.FUNCTION_DECL: NodeKind.FUNCTION,
    CursorKind.CXX_METHOD: NodeKind.METHOD,
    CursorKind.PARM_DECL: NodeKind.PARAMETER,
}


@dataclass
class Diagnostic:
    """A parser diagnostic, copied out of libclang."""

    severity: int
    message: str
    file: str | None = None
    line: int = 0
    column: int = 0

    @property
    def is_error(self) -> bool:
        return self.severity >= SEVERITY_ERROR

    def format(self) -> str:
        label = SEVERITY_LABELS.get(self.severity, "NOTE")
        if self.file:
            return f"{label}: {self.file}:{self.line}:{self.column}: {self.message}"
        return f"{label}: {self.message}"


@dataclass
class ParsedUnit:
    """A parsed compilation unit: its root node, main file and diagnostics."""

    root: ClangNode
    source_path: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    # keeps the libclang translation unit alive while nodes are in use
    translation_unit: Any = None


def _anonymous(spelling: str) -> bool:
    # newer libclang spells unnamed records "(anonymous class at f.h:3:1)"
    return spelling.startswith("(anonymous") or spelling.startswith("(unnamed")


class ClangNode:
    """Node interface over a ``clang.cindex.Cursor``."""

    __slots__ = ("_cursor", "_main_file")

    def __init__(self, cursor: cindex.Cursor, main_file: str) -> None:
        self._cursor = cursor
        self._main_file = main_file

    def __repr__(self) -> str:
        return f"ClangNode({self.kind.value}, {self.spelling!r})"

    @property
    def kind(self) -> NodeKind:
        return _KIND_MAP.get(self._cursor.kind, NodeKind.OTHER)

    @property
    def spelling(self) -> str:
        spelling = str(self._cursor.spelling or "")
        return "" if _anonymous(spelling) else spelling

    @property
    def type_spelling(self) -> str:
        return str(self._cursor.type.spelling)

    @property
    def result_type_spelling(self) -> str:
        return str(self._cursor.result_type.spelling)

    @property
    def result_is_void(self) -> bool:
        return self._cursor.result_type.get_canonical().kind == TypeKind.VOID

    @property
    def in_main_file(self) -> bool:
        location_file = self._cursor.location.file
        if location_file is None:
            return False
        return os.path.realpath(location_file.name) == self._main_file

    @property
    def is_static(self) -> bool:
        if self._cursor.kind != CursorKind.CXX_METHOD:
            return False
        return bool(self._cursor.is_static_method())

    @property
    def is_variadic(self) -> bool:
        func_type = self._cursor.type
        if func_type.kind != TypeKind.FUNCTIONPROTO:
            return False
        return bool(func_type.is_function_variadic())

    def children(self) -> Iterator[ClangNode]:
        for child in self._cursor.get_children():
            yield ClangNode(child, self._main_file)


def load_library(library_file: str | None = None) -> None:
    """Point ``clang.cindex`` at a specific libclang, if one was configured.

    The explicit argument wins over the ``STUBFACTORY_LIBCLANG`` environment
    variable.  Without either, the library bundled with the ``libclang``
    distribution is used.
    """
    library_file = library_file or os.environ.get(LIBCLANG_ENV)
    if not library_file:
        return
    if cindex.Config.loaded:
        logger.debug("libclang already loaded, ignoring %s", library_file)
        return
    if not os.path.exists(library_file):
        raise LibclangNotFoundError(f"No such file: {library_file}")
    cindex.Config.set_library_file(library_file)
    logger.debug("using libclang at %s", library_file)


def parse_translation_unit(
    clang_args: list[str],
    *,
    library_file: str | None = None,
) -> ParsedUnit:
    """Parse a compilation unit from compiler-style arguments.

    The arguments are handed to libclang exactly as they would be given to
    the compiler, source path included.  Function bodies are skipped.

    Raises:
        LibclangNotFoundError: If the shared library cannot be loaded
        ParseError: If libclang cannot build a translation unit
    """
    load_library(library_file)

    logger.debug("parsing with arguments: %s", " ".join(clang_args))
    try:
        index = cindex.Index.create(excludeDecls=True)
    except cindex.LibclangError as exc:
        raise LibclangNotFoundError(str(exc)) from exc

    try:
        tu = index.parse(
            None,
            args=list(clang_args),
            options=cindex.TranslationUnit.PARSE_SKIP_FUNCTION_BODIES,
        )
    except cindex.TranslationUnitLoadError as exc:
        raise ParseError(f"parser failed to build a translation unit: {exc}") from exc

    source_path = str(tu.spelling)
    diagnostics = [_copy_diagnostic(d) for d in tu.diagnostics]
    root = ClangNode(tu.cursor, os.path.realpath(source_path))

    return ParsedUnit(
        root=root,
        source_path=source_path,
        diagnostics=diagnostics,
        translation_unit=tu,
    )


def _copy_diagnostic(diag: cindex.Diagnostic) -> Diagnostic:
    location = diag.location
    return Diagnostic(
        severity=int(diag.severity),
        message=str(diag.spelling),
        file=location.file.name if location.file is not None else None,
        line=location.line,
        column=location.column,
    )


def check_diagnostics(
    diagnostics: list[Diagnostic],
    stream: TextIO | None = None,
) -> None:
    """Print every diagnostic, then fail if any was an error.

    All diagnostics are written before raising so the user sees the full list.

    Raises:
        DiagnosticError: If at least one diagnostic is at error severity or above
    """
    stream = stream if stream is not None else sys.stderr
    errors = []

    for diag in diagnostics:
        if diag.severity <= SEVERITY_IGNORED:
            continue
        print(diag.format(), file=stream)
        if diag.is_error:
            errors.append(diag.message)

    if errors:
        raise DiagnosticError(errors)
