from __future__ import annotations

import re
from typing import List, Optional, Sequence

from .model import ClassHeader, ConversionResult, FieldDescriptor, MethodDescriptor

INDENT = "  "

_TYPE_PARAM_NAME_RE = re.compile(r"\s*([A-Za-z_$][\w$]*)")


# ======================================================================
#  Rendering helpers
# ======================================================================

def _type_arguments(type_parameters: str) -> str:
    """
    `<K extends Object, V>` -> `<K, V>`: the parameter names only, for use
    in the `implements` clause.
    """
    if not type_parameters:
        return ""
    inner = type_parameters[1:-1]
    names: List[str] = []
    depth = 0
    part_start = 0
    for i, ch in enumerate(inner + ","):
        if ch in "<([{":
            depth += 1
        elif ch in ">)]}":
            depth -= 1
        elif ch == "," and depth == 0:
            m = _TYPE_PARAM_NAME_RE.match(inner[part_start:i])
            if m:
                names.append(m.group(1))
            part_start = i + 1
    return f"<{', '.join(names)}>"


def _join(*parts: str) -> str:
    return " ".join(p for p in parts if p)


def _signature(m: MethodDescriptor) -> str:
    """Declaration head without body: `Future<int> load(String id)`, `int get count`."""
    if m.is_getter:
        return _join(m.return_type, f"get {m.name}")
    if m.is_setter:
        return _join(m.return_type, f"set {m.name}{m.params}")
    return _join(m.return_type, f"{m.name}{m.type_parameters}{m.params}")


def _with_body(m: MethodDescriptor) -> str:
    return _join(_signature(m), m.body_marker, m.body)


def _block(lines: List[str], members: List[List[str]]) -> None:
    """
    Append member line groups separated by one blank line. Only the start of
    each entry is indented; embedded newlines (method bodies) are kept as is.
    """
    for i, member in enumerate(members):
        if i:
            lines.append("")
        lines.extend(f"{INDENT}{line}" for line in member)


# ======================================================================
#  Interface
# ======================================================================

def build_interface(
    interface_name: str,
    fields: Sequence[FieldDescriptor],
    methods: Sequence[MethodDescriptor],
    type_parameters: str = "",
) -> str:
    """
    Abstract class with one getter per field and getter, then one signature
    per ordinary method. Setters are not part of the interface.
    """
    lines: List[str] = [f"abstract class {interface_name}{type_parameters} {{"]

    getters = [f"{f.type} get {f.name};" for f in fields]
    getters += [f"{_signature(m)};" for m in methods if m.is_getter]
    signatures = [f"{_signature(m)};" for m in methods if m.is_plain_method]

    _block(lines, [getters] if getters else [])
    if getters and signatures:
        lines.append("")
    _block(lines, [signatures] if signatures else [])

    lines.append("}")
    return "\n".join(lines)


# ======================================================================
#  Implementation
# ======================================================================

def build_concrete_class(
    implementation_name: str,
    interface_name: str,
    fields: Sequence[FieldDescriptor],
    methods: Sequence[MethodDescriptor],
    header: Optional[ClassHeader] = None,
) -> str:
    """
    Concrete class implementing the interface: overridden final fields,
    getters and methods with their original bodies, setters as they were,
    then a constructor binding every field in declaration order.
    """
    type_parameters = header.type_parameters if header else ""
    implements = [f"{interface_name}{_type_arguments(type_parameters)}"]

    # no superclass or mixins: the generated constructor only binds fields
    decl = f"class {implementation_name}{type_parameters}"
    if header:
        implements += [i for i in header.implements if i not in implements]
    decl += f" implements {', '.join(implements)} {{"

    members: List[List[str]] = []
    members += [["@override", f"final {f.type} {f.name};"] for f in fields]
    # bodies keep their own line breaks and indentation
    members += [["@override", _with_body(m)] for m in methods if m.is_getter]
    members += [[_with_body(m)] for m in methods if m.is_setter]
    members += [["@override", _with_body(m)] for m in methods if m.is_plain_method]

    if fields:
        bound = ", ".join(f"this.{f.name}" for f in fields)
        members.append([f"{implementation_name}({bound});"])

    lines: List[str] = [decl]
    _block(lines, members)
    lines.append("}")
    return "\n".join(lines)


def generate(
    class_name: str,
    interface_prefix: str,
    implementation_suffix: str,
    fields: Sequence[FieldDescriptor],
    methods: Sequence[MethodDescriptor],
    header: Optional[ClassHeader] = None,
) -> ConversionResult:
    """Render both classes. Pure and deterministic."""
    interface_name = f"{interface_prefix}{class_name}"
    implementation_name = f"{class_name}{implementation_suffix}"
    type_parameters = header.type_parameters if header else ""

    return ConversionResult(
        interface_text=build_interface(interface_name, fields, methods, type_parameters),
        concrete_text=build_concrete_class(
            implementation_name, interface_name, fields, methods, header
        ),
    )
