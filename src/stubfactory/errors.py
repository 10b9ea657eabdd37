"""Shared exception classes for stubfactory."""

from __future__ import annotations


class StubFactoryError(Exception):
    """Base class for errors that abort a stub generation run."""


class UsageError(StubFactoryError):
    """Raised when no compiler arguments were given."""

    def __init__(self) -> None:
        super().__init__(
            "usage: stubfactory [--stub-* options] <compiler arguments...>\n"
            "Pass the arguments you would give the compiler for the file to stub,\n"
            "for example: stubfactory widget.h -x c++ -std=c++17 -Iinclude"
        )


class LibclangNotFoundError(StubFactoryError):
    """Raised when the libclang shared library cannot be loaded."""

    def __init__(self, detail: str = "") -> None:
        message = (
            "libclang could not be loaded.\n"
            "Install it with:\n"
            "  pip install libclang\n"
            "or point stubfactory at an existing library with\n"
            "  --stub-libclang /path/to/libclang.so  (or STUBFACTORY_LIBCLANG)"
        )
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


class ParseError(StubFactoryError):
    """Raised when the parser cannot build a translation unit."""


class DiagnosticError(StubFactoryError):
    """Raised when the parser reported diagnostics at error severity."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = list(messages)
        count = len(self.messages)
        plural = "s" if count != 1 else ""
        super().__init__(f"{count} error diagnostic{plural} reported, no stub generated")
