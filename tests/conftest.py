"""Shared test fixtures for stubfactory tests."""

from dataclasses import dataclass, field

import pytest

from stubfactory.clang_ast import NodeKind


@dataclass
class FakeNode:
    """Stand-in for a parsed syntax tree node (no libclang needed)."""

    kind: NodeKind
    spelling: str = ""
    type_spelling: str = ""
    result_type_spelling: str = ""
    result_is_void: bool = False
    in_main_file: bool = True
    is_static: bool = False
    is_variadic: bool = False
    nodes: list = field(default_factory=list)

    def children(self):
        return iter(self.nodes)


class NodeFactory:
    """Builds small syntax trees for collector tests."""

    def unit(self, *nodes):
        return FakeNode(NodeKind.OTHER, spelling="unit.cpp", nodes=list(nodes))

    def namespace(self, name, *nodes, main=True):
        return FakeNode(NodeKind.NAMESPACE, spelling=name, in_main_file=main, nodes=list(nodes))

    def klass(self, name, *members, main=True):
        return FakeNode(NodeKind.CLASS, spelling=name, in_main_file=main, nodes=list(members))

    def param(self, name, type_):
        return FakeNode(NodeKind.PARAMETER, spelling=name, type_spelling=type_)

    def function(self, name, ret="void", *params, main=True, variadic=False):
        return FakeNode(
            NodeKind.FUNCTION,
            spelling=name,
            result_type_spelling=ret,
            result_is_void=(ret == "void"),
            in_main_file=main,
            is_variadic=variadic,
            nodes=[self.param(n, t) for n, t in params],
        )

    def method(self, name, ret="void", *params, static=False):
        return FakeNode(
            NodeKind.METHOD,
            spelling=name,
            result_type_spelling=ret,
            result_is_void=(ret == "void"),
            is_static=static,
            nodes=[self.param(n, t) for n, t in params],
        )

    def other(self, spelling="", *nodes, main=True):
        return FakeNode(NodeKind.OTHER, spelling=spelling, in_main_file=main, nodes=list(nodes))


@pytest.fixture
def nodes():
    """Factory for fake syntax trees.

    Usage:
        nodes.unit(nodes.namespace("app", nodes.function("add", "int", ("a", "int"))))
    """
    return NodeFactory()
