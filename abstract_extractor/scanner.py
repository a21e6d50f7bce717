"""
abstract_extractor/scanner.py

Character-level scanners shared by the regex extraction strategy:

  - strip_comments       remove // and /* */ comments (string literals untouched)
  - match_class_header   first `class Name [<T>] [extends ..] [with ..] [implements ..] {`
  - extract_body         text between the class braces, found by depth counting
  - scan_type            end offset of a Dart type expression (balanced generics)

All scanners know about Dart string literals ('..', "..", '''..''', r'..' and
${...} interpolation) so braces or comment markers inside strings are ignored.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Iterator, List, Optional, Tuple

from .model import ClassHeader

logger = logging.getLogger(__name__)

IDENT = r"[A-Za-z_$][\w$]*"

_QUALIFIED_RE = re.compile(rf"{IDENT}(?:\.{IDENT})*")
_CLASS_RE = re.compile(rf"\bclass\s+({IDENT})")
_FUNCTION_SUFFIX_RE = re.compile(r"\s+Function\b")
_CLAUSE_RE = re.compile(r"(extends|with|implements)\b")
_WS_RE = re.compile(r"\s*")

_OPENERS = {"(": ")", "[": "]", "{": "}", "<": ">"}


# ---------------------------------------------------------------------------
# Low-level walking
# ---------------------------------------------------------------------------

def _comment_end(src: str, i: int) -> Optional[int]:
    """If a comment starts at i, return the offset just past it."""
    if src.startswith("//", i):
        j = src.find("\n", i)
        return len(src) if j < 0 else j
    if src.startswith("/*", i):
        j = src.find("*/", i + 2)
        return len(src) if j < 0 else j + 2
    return None


def _starts_string(src: str, i: int) -> bool:
    ch = src[i]
    if ch in ("'", '"'):
        return True
    if ch == "r" and src[i + 1:i + 2] in ("'", '"'):
        # raw string prefix, not the tail of an identifier like `bar'`
        return i == 0 or not (src[i - 1].isalnum() or src[i - 1] in "_$")
    return False


def _string_end(src: str, i: int) -> int:
    """Offset just past the string literal starting at i (unterminated -> end of line/input)."""
    raw = src[i] == "r"
    if raw:
        i += 1
    quote = src[i:i + 3] if src[i:i + 3] in ("'''", '"""') else src[i]
    i += len(quote)
    n = len(src)
    while i < n:
        if src.startswith(quote, i):
            return i + len(quote)
        ch = src[i]
        if ch == "\n" and len(quote) == 1:
            return i
        if not raw and ch == "\\":
            i += 2
            continue
        if not raw and ch == "$" and src.startswith("{", i + 1):
            end = block_end(src, i + 1)
            i = n if end is None else end
            continue
        i += 1
    return n


def _rewrite(
    source: str,
    on_comment: Callable[[str], str],
    on_string: Callable[[str], str],
) -> str:
    out: List[str] = []
    i = 0
    n = len(source)
    while i < n:
        end = _comment_end(source, i)
        if end is not None:
            out.append(on_comment(source[i:end]))
            i = end
            continue
        if _starts_string(source, i):
            end = _string_end(source, i)
            out.append(on_string(source[i:end]))
            i = end
            continue
        out.append(source[i])
        i += 1
    return "".join(out)


def _blank(text: str) -> str:
    return re.sub(r"[^\n]", " ", text)


def _keep(text: str) -> str:
    return text


def _drop(text: str) -> str:
    return ""


def iter_code(src: str, start: int = 0) -> Iterator[Tuple[int, str]]:
    """Yield (offset, char) for every character outside comments and string literals."""
    i = start
    n = len(src)
    while i < n:
        end = _comment_end(src, i)
        if end is not None:
            i = end
            continue
        if _starts_string(src, i):
            i = _string_end(src, i)
            continue
        yield i, src[i]
        i += 1


def balanced_end(src: str, start: int) -> Optional[int]:
    """
    src[start] is one of ( [ { <. Return the offset just past its matching
    closer, or None when the input ends first.
    """
    opener = src[start]
    closer = _OPENERS[opener]
    depth = 0
    for i, ch in iter_code(src, start):
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth == 0:
                return i + 1
    return None


def block_end(src: str, start: int) -> Optional[int]:
    return balanced_end(src, start)


def skip_ws(src: str, pos: int) -> int:
    return _WS_RE.match(src, pos).end()


# ---------------------------------------------------------------------------
# Comment Stripper
# ---------------------------------------------------------------------------

def strip_comments(source: str, keep_layout: bool = False) -> str:
    """
    Remove every // line comment and /* */ block comment.

    keep_layout=True blanks comments with spaces (newlines kept) instead of
    deleting them, so offsets in the result match offsets in `source`.
    """
    return _rewrite(source, _blank if keep_layout else _drop, _keep)


def mask_literals(source: str) -> str:
    """Blank out comments and string literals, keeping offsets."""
    return _rewrite(source, _blank, _blank)


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

def _scan_simple_type(src: str, pos: int) -> Optional[int]:
    if src.startswith("(", pos):
        # record type: (int, String name)
        end = balanced_end(src, pos)
    else:
        m = _QUALIFIED_RE.match(src, pos)
        if not m:
            return None
        end = m.end()
        if src.startswith("<", end):
            end = balanced_end(src, end)
    if end is None:
        return None
    if src.startswith("?", end):
        end += 1
    return end


def scan_type(src: str, pos: int) -> Optional[int]:
    """
    Return the offset just past the type expression starting at pos, or None.

    Generic arguments are matched by bracket depth, never by the first `>`,
    so `Stream<Iterable<Budget>>` is taken whole. Function types such as
    `void Function(int)?` are included.
    """
    end = _scan_simple_type(src, pos)
    if end is None:
        return None
    while True:
        fn = _FUNCTION_SUFFIX_RE.match(src, end)
        if fn:
            fn_end = fn.end()
        elif src[pos:end].endswith("Function"):
            fn_end = end
        else:
            return end
        if src.startswith("<", fn_end):
            fn_end = balanced_end(src, fn_end)
            if fn_end is None:
                return end
        if not src.startswith("(", fn_end):
            return end
        fn_end = balanced_end(src, fn_end)
        if fn_end is None:
            return end
        if src.startswith("?", fn_end):
            fn_end += 1
        end = fn_end


def _type_list(src: str, pos: int) -> Tuple[List[str], int]:
    """Comma separated types: `A, B<C>, D`. Returns ([], pos) when none found."""
    types: List[str] = []
    while True:
        start = skip_ws(src, pos)
        end = scan_type(src, start)
        if end is None:
            return types, pos
        types.append(src[start:end])
        pos = skip_ws(src, end)
        if not src.startswith(",", pos):
            return types, pos
        pos += 1


# ---------------------------------------------------------------------------
# Class Header Matcher
# ---------------------------------------------------------------------------

def _parse_header(src: str, m: re.Match) -> Optional[ClassHeader]:
    pos = skip_ws(src, m.end())
    type_parameters = ""
    if src.startswith("<", pos):
        end = balanced_end(src, pos)
        if end is None:
            return None
        type_parameters = src[pos:end]
        pos = skip_ws(src, end)

    clauses = {}
    while not src.startswith("{", pos):
        cm = _CLAUSE_RE.match(src, pos)
        if not cm or cm.group(1) in clauses:
            return None
        types, pos = _type_list(src, cm.end())
        if not types or (cm.group(1) == "extends" and len(types) != 1):
            return None
        clauses[cm.group(1)] = tuple(types)

    return ClassHeader(
        name=m.group(1),
        extends=clauses.get("extends", (None,))[0],
        implements=clauses.get("implements", ()),
        mixins=clauses.get("with", ()),
        type_parameters=type_parameters,
        offset=m.start(),
    )


def match_class_header(stripped: str) -> Optional[ClassHeader]:
    """
    Locate the first class declaration that reaches its opening `{`.

    Clauses may come in any order. Candidates that never reach `{`
    (e.g. `class A = B with M;`) are skipped. Returns None when no class
    is found; that is the normal "nothing to convert" outcome.
    """
    masked = mask_literals(stripped)
    for m in _CLASS_RE.finditer(masked):
        header = _parse_header(masked, m)
        if header is not None:
            return header
    return None


# ---------------------------------------------------------------------------
# Body Extractor
# ---------------------------------------------------------------------------

def extract_body(source: str, offset: int) -> str:
    """
    Text strictly between the first `{` at/after `offset` and its matching `}`.

    Runs on the original (comment-bearing) source so bodies stay verbatim.
    Unbalanced input is handled best effort: the rest of the text after the
    opening brace is returned and a warning is logged.
    """
    start = next((i for i, ch in iter_code(source, offset) if ch == "{"), None)
    if start is None:
        return ""
    end = block_end(source, start)
    if end is None:
        logger.warning(
            "No closing brace for class body opened at offset %d; using the rest of the input",
            start,
        )
        return source[start + 1:]
    return source[start + 1:end - 1]
