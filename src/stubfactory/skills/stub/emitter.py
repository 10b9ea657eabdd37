"""Generate stub source text from collected declarations.

For every declared function the stub file holds a set of global variables a
unit test can use to steer and inspect the stub:

- ``g_<prefix>_<name>_return``: value returned by the stub (non-void only)
- ``g_<prefix>_<name>_callCount``: number of calls since the last reset
- ``g_<prefix>_<name>_<param>``: last value received for each parameter
- ``g_<prefix>_<name>_hook``: optional function called in place of the stub

``<prefix>`` is the owning class for methods and the stub name for free
functions.  A single ``stub_<stub name>_reset()`` routine clears call counts
and hooks between tests.
"""

from __future__ import annotations

import re
from pathlib import Path

from stubfactory.skills.stub.model import Collection, DeclarationRecord, Parameter

INDENT = "    "

STANDARD_INCLUDES = ("stdint.h", "stdlib.h")

# return values and captured arguments are not reset yet
RESET_PLACEHOLDERS = (
    "/* TODO: reset return values to their defaults */",
    "/* TODO: reset captured arguments to their defaults */",
)

_NON_IDENTIFIER_RE = re.compile(r"[^0-9A-Za-z_]")

# suffixes of the state variables every record owns
STATE_SUFFIXES = ("return", "callCount", "hook")


def derive_stub_name(source_path: str) -> str:
    """Base name of the source file without its extension, as an identifier."""
    stem = Path(source_path).stem
    name = _NON_IDENTIFIER_RE.sub("_", stem)
    if not name or name[0].isdigit():
        name = f"_{name}"
    return name


def variable_name(record: DeclarationRecord, stub_name: str, suffix: str) -> str:
    """Name of one of a record's state variables, e.g. ``g_Widget_render_hook``."""
    return f"g_{record.prefix(stub_name)}_{record.name}_{suffix}"


def capture_name(record: DeclarationRecord, stub_name: str, param: Parameter) -> str:
    """Name of the variable capturing ``param``.

    A parameter called ``return``, ``callCount`` or ``hook`` would share its
    name with a state variable, so its capture gets an ``_arg`` suffix (more
    underscores if another parameter already uses that name).
    """
    suffix = param.name
    if suffix in STATE_SUFFIXES:
        taken = {p.name for p in record.parameters}
        suffix = f"{suffix}_arg"
        while suffix in taken:
            suffix = f"{suffix}_"
    return variable_name(record, stub_name, suffix)


def render_stub(collection: Collection, source_path: str, stub_name: str) -> str:
    """Render the complete stub file for one collector pass.

    Sections appear in a fixed order: includes, ``using`` directives, state
    variables, the reset routine, then one stub body per declaration.  The
    result depends only on the inputs.
    """
    lines: list[str] = []

    lines.extend(render_includes(source_path))
    lines.append("")

    lines.extend(render_namespaces(collection.namespaces))
    lines.append("")

    for record in collection.declarations:
        lines.extend(render_variables(record, stub_name))
        lines.append("")

    lines.extend(render_reset(collection.declarations, stub_name))
    lines.append("")

    for record in collection.declarations:
        lines.extend(render_body(record, stub_name))
        lines.append("")

    return "\n".join(lines)


def render_includes(source_path: str) -> list[str]:
    lines = [f"#include <{header}>" for header in STANDARD_INCLUDES]
    lines.append(f'#include "{source_path}"')
    return lines


def render_namespaces(namespaces: list[str]) -> list[str]:
    # repeated namespaces are kept, one directive each
    return [f"using namespace {ns};" for ns in namespaces if ns]


def render_variables(record: DeclarationRecord, stub_name: str) -> list[str]:
    """Declare the return, call count, argument capture and hook variables."""
    lines = []

    if not record.returns_void:
        lines.append(f"{record.return_type} {variable_name(record, stub_name, 'return')};")

    lines.append(f"uint32_t {variable_name(record, stub_name, 'callCount')} = 0;")

    for param in record.parameters:
        lines.append(f"{param.type} {capture_name(record, stub_name, param)};")

    lines.append(
        f"{_hook_return_type(record)} "
        f"(*{variable_name(record, stub_name, 'hook')})({_hook_parameter_types(record)});"
    )
    return lines


def render_reset(records: list[DeclarationRecord], stub_name: str) -> list[str]:
    """Render ``stub_<stub name>_reset()``.

    Call counts are all zeroed first, then all hooks are cleared.
    """
    lines = [f"void stub_{stub_name}_reset(void)", "{"]
    lines.extend(f"{INDENT}{placeholder}" for placeholder in RESET_PLACEHOLDERS)

    for record in records:
        lines.append(f"{INDENT}{variable_name(record, stub_name, 'callCount')} = 0;")

    lines.append("")

    for record in records:
        lines.append(f"{INDENT}{variable_name(record, stub_name, 'hook')} = NULL;")

    lines.append("}")
    return lines


def render_body(record: DeclarationRecord, stub_name: str) -> list[str]:
    """Render the stub definition that replaces the original implementation."""
    hook = variable_name(record, stub_name, "hook")

    lines = [f"{record.return_type} {record.qualified_name()}({_parameter_list(record)})", "{"]

    if not record.returns_void:
        lines.append(
            f"{INDENT}{record.return_type} ret = {variable_name(record, stub_name, 'return')};"
        )

    lines.append(f"{INDENT}{variable_name(record, stub_name, 'callCount')}++;")

    for param in record.parameters:
        lines.append(f"{INDENT}{capture_name(record, stub_name, param)} = {param.name};")

    arguments = ", ".join(param.name for param in record.parameters)
    assign = "" if record.returns_void else "ret = "
    lines.append(f"{INDENT}if ({hook} != NULL) {{")
    lines.append(f"{INDENT}{INDENT}{assign}{hook}({arguments});")
    lines.append(f"{INDENT}}}")

    if not record.returns_void:
        lines.append(f"{INDENT}return ret;")

    lines.append("}")
    return lines


def _hook_return_type(record: DeclarationRecord) -> str:
    return "void" if record.returns_void else record.return_type


def _hook_parameter_types(record: DeclarationRecord) -> str:
    if not record.parameters:
        return "void"
    return ", ".join(param.type for param in record.parameters)


def _parameter_list(record: DeclarationRecord) -> str:
    if not record.parameters:
        return "void"
    return ", ".join(f"{param.type} {param.name}" for param in record.parameters)
