"""Walk a parsed syntax tree and collect the declarations to stub.

Only declarations written in the main file of the compilation unit are
considered.  Namespaces are recorded (for ``using`` directives) and walked,
classes are scanned for their direct instance methods, and free functions are
recorded as they are met.  Everything coming from included headers is skipped
without descending into it.
"""

from __future__ import annotations

import enum
import logging
import re
from typing import Any

from stubfactory.clang_ast import NodeKind
from stubfactory.skills.stub.model import Collection, DeclarationRecord, Parameter

logger = logging.getLogger(__name__)

# operator+, operator(), operator new[], conversion operators...
_OPERATOR_RE = re.compile(r"^operator\b")


class Visit(enum.Enum):
    """What the walk does with one node."""

    SKIP = "skip"
    RECURSE = "recurse"
    SCAN_CLASS = "scan_class"
    RECORD = "record"


def decide(node: Any) -> Visit:
    """Classify a node met at namespace (or file) scope."""
    if not node.in_main_file:
        return Visit.SKIP

    kind = node.kind
    if kind == NodeKind.NAMESPACE:
        return Visit.RECURSE
    if kind == NodeKind.CLASS:
        return Visit.SCAN_CLASS
    if kind == NodeKind.FUNCTION:
        return Visit.RECORD
    if kind in (NodeKind.METHOD, NodeKind.PARAMETER):
        # out-of-line method definitions; the class body is scanned instead
        return Visit.SKIP
    return Visit.RECURSE


def collect(root: Any) -> Collection:
    """Collect namespaces and stub-able declarations below ``root``.

    ``root`` is the translation unit node; only its descendants are visited.
    """
    collection = Collection()
    _walk(root, collection)
    logger.debug(
        "collected %d declarations, %d namespaces",
        len(collection.declarations),
        len(collection.namespaces),
    )
    return collection


def _walk(parent: Any, collection: Collection) -> None:
    for node in parent.children():
        action = decide(node)

        if action == Visit.SKIP:
            continue

        if action == Visit.RECURSE:
            if node.kind == NodeKind.NAMESPACE:
                collection.namespaces.append(node.spelling)
            _walk(node, collection)

        elif action == Visit.SCAN_CLASS:
            _scan_class(node, collection)

        elif action == Visit.RECORD:
            _record(node, None, collection)


def _scan_class(class_node: Any, collection: Collection) -> None:
    """Record the direct instance methods of a class or struct."""
    owner = class_node.spelling
    if not owner:
        logger.debug("skipping anonymous class")
        return

    for member in class_node.children():
        if member.kind != NodeKind.METHOD:
            continue
        if member.is_static:
            logger.debug("skipping static method %s::%s", owner, member.spelling)
            continue
        _record(member, owner, collection)


def _record(node: Any, owner: str | None, collection: Collection) -> None:
    name = node.spelling
    display = f"{owner}::{name}" if owner else name

    if _OPERATOR_RE.match(name):
        logger.debug("skipping operator overload %s", display)
        return
    if node.is_variadic:
        logger.debug("skipping variadic function %s", display)
        return

    record = DeclarationRecord(
        name=name,
        return_type=node.result_type_spelling,
        returns_void=node.result_is_void,
        owner=owner,
        parameters=_parameters(node),
    )

    # a prototype and its definition in the same file yield one stub
    if any(_same_signature(record, seen) for seen in collection.declarations):
        logger.debug("skipping redeclaration of %s", display)
        return

    collection.declarations.append(record)
    logger.debug("recorded %s", display)


def _same_signature(a: DeclarationRecord, b: DeclarationRecord) -> bool:
    return (
        a.owner == b.owner
        and a.name == b.name
        and [p.type for p in a.parameters] == [p.type for p in b.parameters]
    )


def _parameters(func_node: Any) -> tuple[Parameter, ...]:
    """Read parameter names and types in declaration order.

    Unnamed parameters get positional names (``arg0``, ``arg1``...) that do
    not clash with the names of the other parameters.
    """
    children = [c for c in func_node.children() if c.kind == NodeKind.PARAMETER]
    taken = {c.spelling for c in children if c.spelling}

    params = []
    for position, child in enumerate(children):
        name = child.spelling
        if not name:
            name = f"arg{position}"
            while name in taken:
                name = f"{name}_"
            taken.add(name)
        params.append(Parameter(name=name, type=child.type_spelling))
    return tuple(params)
