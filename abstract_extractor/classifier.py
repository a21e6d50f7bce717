"""
abstract_extractor/classifier.py

Class body -> ordered fields + ordered methods.

The body is first cut into top-level member declarations by a small scanner
(a declaration ends at a depth-zero `;` or when a depth-zero `{ ... }` block
closes). Each declaration is then read left to right:

    [annotations] [modifiers] [Type] name ...

and classified as constructor, getter, setter, method or field. Anything that
cannot be read is skipped; classification never raises.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from .model import FieldDescriptor, MethodDescriptor
from .scanner import (
    IDENT,
    balanced_end,
    iter_code,
    scan_type,
    skip_ws,
    strip_comments,
)

logger = logging.getLogger(__name__)

_IDENT_RE = re.compile(IDENT)
_ANNOTATION_RE = re.compile(rf"@{IDENT}(?:\.{IDENT})*")
_MODIFIER_RE = re.compile(
    r"(static|late|final|const|var|external|covariant|abstract|factory)\b"
)
_BODY_MARKER_RE = re.compile(r"(async\*|async|sync\*)(?![\w$])")
_OPERATOR_RE = re.compile(r"\boperator\b")
_DECLARATOR_RE = re.compile(rf"({IDENT})\s*(?==|,|;|$)")

# words that can never start a type, even when the modifier scan misses them
_RESERVED = {"return", "final", "const", "var", "late", "static", "get", "set",
             "operator", "new", "this", "super", "if", "for", "while", "switch"}

PRIVATE_MARKER = "_"


def is_exported(name: str, class_name: str) -> bool:
    """Public, non-constructor member names are the only ones ever generated."""
    return bool(name) and not name.startswith(PRIVATE_MARKER) and name != class_name


# ---------------------------------------------------------------------------
# Declaration splitting
# ---------------------------------------------------------------------------

def split_declarations(body: str) -> List[Tuple[int, int]]:
    """
    (start, end) offsets of every top-level declaration in a class body.

    Braces only end a declaration when they open a block at depth zero and no
    `=` / `=>` came first, so `final m = {1: 2};` and `get x => {};` run to
    their `;` while `void f() { ... }` ends at its `}`.
    """
    spans: List[Tuple[int, int]] = []
    start = 0
    depth = 0
    expression = False
    seen_paren = False
    block = False
    prev = ""

    for i, ch in iter_code(body):
        if ch in "([{":
            if depth == 0:
                if ch == "(":
                    seen_paren = True
                elif ch == "{" and not expression:
                    block = True
            depth += 1
        elif ch in ")]}":
            depth = max(depth - 1, 0)
            if ch == "}" and depth == 0 and block:
                spans.append((start, i + 1))
                start, expression, seen_paren, block = i + 1, False, False, False
        elif depth == 0:
            if ch == ";":
                spans.append((start, i + 1))
                start, expression, seen_paren, block = i + 1, False, False, False
            elif ch == "=":
                nxt = body[i + 1:i + 2]
                if nxt == ">":
                    expression = True
                elif (
                    not seen_paren
                    and nxt != "="
                    and prev not in "=!<>"
                    and not _OPERATOR_RE.search(body, start, i)
                ):
                    expression = True
        prev = ch

    if body[start:].strip() and strip_comments(body[start:]).strip():
        spans.append((start, len(body)))
    return spans


# ---------------------------------------------------------------------------
# Declaration reading
# ---------------------------------------------------------------------------

def _skip_annotations(text: str, pos: int) -> int:
    while True:
        pos = skip_ws(text, pos)
        m = _ANNOTATION_RE.match(text, pos)
        if not m:
            return pos
        pos = m.end()
        if text.startswith("(", pos):
            end = balanced_end(text, pos)
            pos = len(text) if end is None else end


def _read_modifiers(text: str, pos: int) -> Tuple[set, int]:
    mods = set()
    while True:
        pos = skip_ws(text, pos)
        m = _MODIFIER_RE.match(text, pos)
        if not m:
            return mods, pos
        mods.add(m.group(1))
        pos = m.end()


def _split_name(text: str) -> Tuple[str, str]:
    """`cast<T>` -> ("cast", "<T>")."""
    m = _IDENT_RE.match(text)
    if not m:
        return text, ""
    return m.group(0), text[m.end():]


def _read_fields(
    text: str, pos: int, field_type: str
) -> List[FieldDescriptor]:
    """Declarators from `pos`: `a = 1, b, c = f(x, y);`."""
    fields: List[FieldDescriptor] = []
    while True:
        m = _DECLARATOR_RE.match(text, skip_ws(text, pos))
        if not m:
            return fields
        fields.append(FieldDescriptor(type=field_type, name=m.group(1)))
        pos = m.end()

        # skip the initializer up to the next top-level comma that starts a declarator
        depth = 0
        next_pos = None
        for i, ch in iter_code(text, pos):
            if ch in "([{":
                depth += 1
            elif ch in ")]}":
                depth -= 1
            elif depth == 0 and ch == ";":
                return fields
            elif depth == 0 and ch == "," and _DECLARATOR_RE.match(text, skip_ws(text, i + 1)):
                next_pos = i + 1
                break
        if next_pos is None:
            return fields
        pos = next_pos


def _body_start(text: str, pos: int) -> Tuple[Optional[int], str]:
    """After a parameter list: optional async marker, then `=>` or `{`."""
    pos = skip_ws(text, pos)
    marker = ""
    m = _BODY_MARKER_RE.match(text, pos)
    if m:
        marker = m.group(1)
        pos = skip_ws(text, m.end())
    if text.startswith("=>", pos) or text.startswith("{", pos):
        return pos, marker
    return None, marker


def _classify_declaration(
    source: str, class_name: str
) -> Tuple[List[FieldDescriptor], Optional[MethodDescriptor]]:
    """
    Read one declaration. `source` is the verbatim declaration text;
    parsing happens on a comment-blanked copy with identical offsets so the
    body can be cut from the original.
    """
    text = strip_comments(source, keep_layout=True)
    pos = _skip_annotations(text, 0)
    mods, pos = _read_modifiers(text, pos)

    if mods & {"abstract", "external", "factory"}:
        return [], None

    type_end = scan_type(text, pos)
    if type_end is None:
        return [], None
    first = text[pos:type_end]
    nxt = skip_ws(text, type_end)

    # `name(...)` / `name<T>(...)` / `Name.named(...)` without a return type
    if text.startswith("(", nxt):
        name, type_parameters = _split_name(first)
        return [], _read_method(
            source, text, class_name, mods,
            return_type="", name=name, type_parameters=type_parameters,
            pos=nxt, qualified="." in first,
        )

    # `get name` / `set name(...)` without a return type
    if first in ("get", "set"):
        nm = _IDENT_RE.match(text, nxt)
        if nm:
            return [], _read_accessor(source, text, mods, first, "", nm.group(0), nm.end())

    if first in _RESERVED:
        return [], None

    word = _IDENT_RE.match(text, nxt)
    if not word:
        # untyped field: `final x = 1;`, `var y;`
        if mods & {"final", "const", "var"} and _IDENT_RE.fullmatch(first):
            if "static" in mods:
                return [], None
            return _read_fields(text, pos, "dynamic"), None
        return [], None

    if word.group(0) == "operator":
        return [], None

    if word.group(0) in ("get", "set"):
        nm = _IDENT_RE.match(text, skip_ws(text, word.end()))
        if nm:
            return [], _read_accessor(
                source, text, mods, word.group(0), first, nm.group(0), nm.end()
            )

    after = skip_ws(text, word.end())
    if text.startswith("(", after) or text.startswith("<", after):
        type_parameters = ""
        if text.startswith("<", after):
            end = balanced_end(text, after)
            if end is None:
                return [], None
            type_parameters = text[after:end]
            after = skip_ws(text, end)
        return [], _read_method(
            source, text, class_name, mods,
            return_type=first, name=word.group(0), type_parameters=type_parameters,
            pos=after, qualified=False,
        )

    if "static" in mods:
        return [], None
    return _read_fields(text, nxt, first), None


def _read_method(
    source: str,
    text: str,
    class_name: str,
    mods: set,
    return_type: str,
    name: str,
    type_parameters: str,
    pos: int,
    qualified: bool,
) -> Optional[MethodDescriptor]:
    if qualified or name == class_name:
        return None  # constructor
    if not text.startswith("(", pos):
        return None
    params_end = balanced_end(text, pos)
    if params_end is None:
        return None
    params = source[pos:params_end]
    if re.search(r"\b(this|super)\.", text[pos:params_end]):
        return None  # initializing formals only appear on constructors

    start, marker = _body_start(text, params_end)
    if start is None:
        return None  # no body: abstract member or redirecting constructor
    return MethodDescriptor(
        name=name,
        return_type=return_type,
        params=params,
        body=source[start:].rstrip(),
        is_static="static" in mods,
        is_async=marker.startswith("async"),
        type_parameters=type_parameters,
        body_marker=marker,
    )


def _read_accessor(
    source: str,
    text: str,
    mods: set,
    keyword: str,
    return_type: str,
    name: str,
    pos: int,
) -> Optional[MethodDescriptor]:
    params = ""
    pos = skip_ws(text, pos)
    if keyword == "set":
        if not text.startswith("(", pos):
            return None
        end = balanced_end(text, pos)
        if end is None:
            return None
        params = source[pos:end]
        pos = end

    start, marker = _body_start(text, pos)
    if start is None:
        return None
    return MethodDescriptor(
        name=name,
        return_type=return_type,
        params=params,
        body=source[start:].rstrip(),
        is_getter=keyword == "get",
        is_setter=keyword == "set",
        is_static="static" in mods,
        is_async=marker.startswith("async"),
        body_marker=marker,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def classify(
    class_body: str, class_name: str
) -> Tuple[List[FieldDescriptor], List[MethodDescriptor]]:
    """
    Ordered (fields, methods) of a class body.

    Only depth-zero declarations are considered, so locals inside method
    bodies never become fields. Private (`_x`), static and constructor
    members are dropped.
    """
    fields: List[FieldDescriptor] = []
    methods: List[MethodDescriptor] = []

    for start, end in split_declarations(class_body):
        declaration = class_body[start:end]
        found_fields, method = _classify_declaration(declaration, class_name)

        for f in found_fields:
            if is_exported(f.name, class_name):
                fields.append(f)

        if method is not None and not method.is_static and is_exported(method.name, class_name):
            methods.append(method)

        if not found_fields and method is None:
            logger.debug("Skipped declaration: %r", declaration.strip()[:80])

    return fields, methods
