"""Highlight skill: terminal syntax highlighting for generated stubs.

Public API
----------
- highlight_source(source, language, *, style="monokai") -> str
"""

from stubfactory.skills.highlight.renderer import highlight_source  # noqa: F401
