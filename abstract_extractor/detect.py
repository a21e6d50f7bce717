import logging
import re
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

# Common extensions mapping
_EXT = {
    ".dart": "dart",
    ".java": "java",
    ".kt": "kotlin",
    ".ts": "typescript",
    ".js": "javascript",
    ".py": "python",
}

# keyword hints for Dart
_DART_HINTS = [
    r"\bimport\s+'package:",                     # package imports
    r"\bimport\s+'dart:",                        # core library imports
    r"\bclass\s+\w+",                            # class declarations
    r"\bfinal\s+\w+(?:<[^;]*>)?\??\s+\w+\s*[;=]",  # typed final fields
    r"\blate\s+",                                # late modifier
    r"\bvoid\s+main\s*\(",                       # entry point
    r"\bFuture<",                                # futures
    r"\bStream<",                                # streams
    r"\basync\s*\{",                             # async bodies
    r"\bawait\b",                                # await
    r"=>\s*[^;]+;",                              # arrow bodies
    r"@override",                                # override annotation
    r"\brequired\s+this\.",                      # named initializing formals
    r"\bthis\.\w+[,)]",                          # initializing formals
    r"\b\w+\s+get\s+\w+\s*(?:=>|\{)",            # getters
    r"\bset\s+\w+\s*\(",                         # setters
    r"\bString\?",                               # null safety
    r"\bwith\s+\w+",                             # mixins
    r"\bprint\s*\(",                             # print()
    r"'\$\{?\w+",                                # string interpolation
    r"\bWidget\s+build\s*\(",                    # flutter widgets
    r"\bsetState\s*\(",                          # flutter state
]

# Hints that point strongly away from Dart
_OTHER_HINTS = {
    "python": [r"^\s*def\s+\w+\s*\(", r"^\s*from\s+\w+\s+import\b", r"\bself\.", r":\s*\n\s+"],
    "java": [r"\bpublic\s+class\b", r"\bSystem\.out\.", r"\bpackage\s+[\w.]+;", r"\bprivate\s+\w+\s+\w+;"],
    "typescript": [r"\bexport\s+(?:default\s+)?(?:class|function|interface)\b", r"\bconstructor\s*\(", r":\s*string\b", r"\bconsole\.log\b"],
}


def _score(patterns, text, lang_name=None):
    hits = sum(bool(re.search(p, text, re.M)) for p in patterns)
    if lang_name:
        logger.debug("%s: %d hits", lang_name, hits)

    # Scale: 3 hits --> 0.6, 7+ hits --> 1.0
    if hits >= 7:
        conf = 1.0
    elif hits >= 3:
        conf = 0.6 + (hits - 3) * (0.4 / 4)
    else:
        conf = hits * (0.6 / 3)

    return round(min(conf, 1.0), 2)


def detect_language(
    code: str,
    filename: Optional[str] = None,
    language_id: Optional[str] = None,
) -> Tuple[str, float, str]:
    """
    Returns (language, confidence, source) where source is one of
    "language_id", "extension", "heuristic" or "none".
    """
    # Editor-provided language id wins
    if language_id:
        return language_id.strip().lower(), 1.0, "language_id"

    # Check by file extension
    if filename:
        for ext, lang in _EXT.items():
            if filename.lower().endswith(ext):
                return lang, 0.95, "extension"

    # Check by code content --> if extension missing
    dart = _score(_DART_HINTS, code, "dart")
    others = [(lang, _score(p, code, lang)) for lang, p in _OTHER_HINTS.items()]

    lang, conf = max([("dart", dart)] + others, key=lambda x: x[1])

    # Only accept if confidence >= 0.6
    if conf >= 0.6:
        return lang, conf, "heuristic"

    return "unknown", 0.0, "none"


def accepts_as_dart(lang: str) -> bool:
    """Undetectable snippets get the benefit of the doubt."""
    return lang in ("dart", "unknown")
