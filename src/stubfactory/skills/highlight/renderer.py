"""Pygments-based highlighting of generated stub source."""

from __future__ import annotations

from pygments import highlight as _pygments_highlight
from pygments.formatters import TerminalFormatter, Terminal256Formatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from stubfactory.lang import LEXER_MAP


def highlight_source(source: str, language: str, *, style: str = "monokai") -> str:
    """Return ``source`` with ANSI colour codes for a terminal.

    Unknown languages come back unchanged.  A named ``style`` selects the
    256-colour formatter; an unknown style falls back to the basic palette.
    """
    lexer_cls = LEXER_MAP.get(language)
    if lexer_cls is None:
        try:
            lexer = get_lexer_by_name(language)
        except ClassNotFound:
            return source
    else:
        lexer = lexer_cls()

    try:
        formatter = Terminal256Formatter(style=style)
    except ClassNotFound:
        formatter = TerminalFormatter()

    return _pygments_highlight(source, lexer, formatter)
