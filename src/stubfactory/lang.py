"""Language detection and Pygments lexer mapping shared across skills."""

from __future__ import annotations

from pathlib import Path

from pygments.lexers import CLexer, CppLexer


EXT_MAP = {
    ".c": "c",
    ".h": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".c++": "cpp",
    ".hh": "cpp",
    ".hpp": "cpp",
    ".hxx": "cpp",
    ".h++": "cpp",
}

LEXER_MAP = {
    "c": CLexer,
    "cpp": CppLexer,
}


def detect_language(source_path: str, clang_args: list[str] | None = None) -> str:
    """Detect whether a file is C or C++.

    An explicit ``-x c``/``-x c++`` (or ``-xc++``) in the compiler arguments
    wins over the file extension.  Unknown extensions default to C++, since
    that is the only language in which class methods can be stubbed.
    """
    if clang_args:
        for i, arg in enumerate(clang_args):
            value = None
            if arg == "-x" and i + 1 < len(clang_args):
                value = clang_args[i + 1]
            elif arg.startswith("-x") and len(arg) > 2:
                value = arg[2:]
            if value is not None:
                if value.startswith("c++"):
                    return "cpp"
                if value.startswith("c"):
                    return "c"

    return EXT_MAP.get(Path(source_path).suffix.lower(), "cpp")
