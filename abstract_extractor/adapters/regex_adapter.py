from typing import Optional

from ..classifier import classify
from ..model import ParsedClass
from ..scanner import extract_body, match_class_header, strip_comments
from .base import BaseAdapter


class RegexDartAdapter(BaseAdapter):
    """
    Dart -> ParsedClass using text scanning only (no external process).

    Steps:
      - strip comments (layout kept so offsets stay valid)
      - match the first class header
      - cut the class body out of the original, comment-bearing source
      - classify the body into fields and methods
    """

    name = "regex"

    def extract(self, source_text: str) -> Optional[ParsedClass]:
        stripped = strip_comments(source_text, keep_layout=True)
        header = match_class_header(stripped)
        if header is None:
            return None

        body = extract_body(source_text, header.offset)
        fields, methods = classify(body, header.name)
        return ParsedClass(header=header, fields=tuple(fields), methods=tuple(methods))
