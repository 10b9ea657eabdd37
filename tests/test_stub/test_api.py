"""Tests for the stub skill public API.

The libclang parse step is replaced with a fake syntax tree, so these run
without a libclang installation.
"""

import io
from unittest.mock import patch

import pytest

from stubfactory.clang_ast import (
    SEVERITY_ERROR,
    SEVERITY_FATAL,
    SEVERITY_WARNING,
    Diagnostic,
    ParsedUnit,
)
from stubfactory.errors import DiagnosticError, ParseError, UsageError
from stubfactory.skills.stub import generate


def _unit(root, source_path="src/calc.cpp", diagnostics=None):
    return ParsedUnit(root=root, source_path=source_path, diagnostics=diagnostics or [])


class TestGenerate:
    def test_requires_arguments(self):
        with pytest.raises(UsageError):
            generate([])

    def test_result_shape(self, nodes):
        root = nodes.unit(
            nodes.namespace("app", nodes.function("add", "int", ("a", "int"), ("b", "int"))),
            nodes.klass("Widget", nodes.method("render")),
        )
        with patch("stubfactory.skills.stub.parse_translation_unit", return_value=_unit(root)):
            result = generate(["src/calc.cpp", "-std=c++17"])

        assert result["stub_name"] == "calc"
        assert result["source_path"] == "src/calc.cpp"
        assert result["language"] == "cpp"
        assert result["namespaces"] == ["app"]
        assert result["declarations"] == [
            {
                "name": "add",
                "owner": None,
                "return_type": "int",
                "returns_void": False,
                "parameters": [{"name": "a", "type": "int"}, {"name": "b", "type": "int"}],
            },
            {
                "name": "render",
                "owner": "Widget",
                "return_type": "void",
                "returns_void": True,
                "parameters": [],
            },
        ]
        assert result["stats"]["declaration_count"] == 2
        assert result["stats"]["method_count"] == 1
        assert result["stats"]["namespace_count"] == 1
        assert '#include "src/calc.cpp"' in result["source"]
        assert "int g_calc_add_return;" in result["source"]
        assert "void Widget::render(void)" in result["source"]

    def test_forwards_arguments_and_library(self, nodes):
        with patch(
            "stubfactory.skills.stub.parse_translation_unit",
            return_value=_unit(nodes.unit()),
        ) as mock_parse:
            generate(["widget.h", "-x", "c++", "-Iinclude"], library_file="/opt/libclang.so")

        mock_parse.assert_called_once_with(
            ["widget.h", "-x", "c++", "-Iinclude"], library_file="/opt/libclang.so"
        )

    def test_explicit_stub_name(self, nodes):
        root = nodes.unit(nodes.function("add", "int"))
        with patch("stubfactory.skills.stub.parse_translation_unit", return_value=_unit(root)):
            result = generate(["src/calc.cpp"], stub_name="math")

        assert result["stub_name"] == "math"
        assert "g_math_add_callCount" in result["source"]
        assert "void stub_math_reset(void)" in result["source"]

    def test_idempotent(self, nodes):
        root = nodes.unit(
            nodes.namespace("app", nodes.function("start", "int")),
            nodes.klass("Widget", nodes.method("render"), nodes.method("resize", "bool", ("w", "int"))),
        )
        with patch("stubfactory.skills.stub.parse_translation_unit", return_value=_unit(root)):
            first = generate(["src/calc.cpp"])
            second = generate(["src/calc.cpp"])

        assert first == second

    def test_header_declarations_not_stubbed(self, nodes):
        root = nodes.unit(
            nodes.function("printf_like", "int", main=False),
            nodes.function("local", "int"),
        )
        with patch("stubfactory.skills.stub.parse_translation_unit", return_value=_unit(root)):
            result = generate(["src/calc.cpp"])

        assert "printf_like" not in result["source"]
        assert "int local(void)" in result["source"]

    def test_parse_error_propagates(self):
        with patch(
            "stubfactory.skills.stub.parse_translation_unit",
            side_effect=ParseError("parser failed"),
        ):
            with pytest.raises(ParseError):
                generate(["missing.cpp"])


class TestGenerateDiagnostics:
    def test_warning_is_reported_but_not_fatal(self, nodes):
        diags = [Diagnostic(SEVERITY_WARNING, "unused variable 'x'")]
        root = nodes.unit(nodes.function("add", "int"))
        stream = io.StringIO()

        with patch(
            "stubfactory.skills.stub.parse_translation_unit",
            return_value=_unit(root, diagnostics=diags),
        ):
            result = generate(["src/calc.cpp"], diagnostics_stream=stream)

        assert "WARNING: unused variable 'x'" in stream.getvalue()
        assert result["stats"]["declaration_count"] == 1

    def test_errors_abort_after_all_are_reported(self, nodes):
        diags = [
            Diagnostic(SEVERITY_ERROR, "unknown type name 'foo'"),
            Diagnostic(SEVERITY_WARNING, "implicit conversion"),
            Diagnostic(SEVERITY_FATAL, "'missing.h' file not found"),
        ]
        stream = io.StringIO()

        with patch(
            "stubfactory.skills.stub.parse_translation_unit",
            return_value=_unit(nodes.unit(), diagnostics=diags),
        ), patch("stubfactory.skills.stub.collect") as mock_collect:
            with pytest.raises(DiagnosticError) as excinfo:
                generate(["src/calc.cpp"], diagnostics_stream=stream)

        output = stream.getvalue().splitlines()
        assert output == [
            "ERROR: unknown type name 'foo'",
            "WARNING: implicit conversion",
            "ERROR: 'missing.h' file not found",
        ]
        assert excinfo.value.messages == ["unknown type name 'foo'", "'missing.h' file not found"]
        mock_collect.assert_not_called()
