"""
External AST extractor -> ParsedClass.

The helper binary is run once per call with the path of a temporary file
holding the source. On success it prints a JSON array:

    [ { "name": "Repo",
        "fields":  [ {"name": "id", "type": "String"} ],
        "methods": [ {"name": "load", "returnType": "void", "params": "()",
                      "body": "{}", "isGetter": false, "isSetter": false} ] } ]

An empty array means no class. A non-zero exit is an ExtractionToolError
carrying the helper's stderr; output that does not fit the shape above is a
MalformedExtractionOutput. Nothing is retried and there is no timeout.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError  # type: ignore

from .. import config
from ..classifier import is_exported
from ..errors import ExtractionToolError, MalformedExtractionOutput
from ..model import ClassHeader, FieldDescriptor, MethodDescriptor, ParsedClass
from .base import BaseAdapter

logger = logging.getLogger(__name__)


class ToolField(BaseModel):
    name: str
    type: str


class ToolMethod(BaseModel):
    name: str
    returnType: str = ""
    params: str = ""
    body: str = ""
    isGetter: bool = False
    isSetter: bool = False
    isStatic: bool = False
    isAsync: bool = False


class ToolClass(BaseModel):
    name: str
    fields: List[ToolField] = []
    methods: List[ToolMethod] = []


_TOOL_OUTPUT = TypeAdapter(List[ToolClass])


class AstToolDartAdapter(BaseAdapter):
    name = "ast"

    def __init__(self, executable: Optional[str] = None) -> None:
        self.executable = executable or config.AST_EXTRACTOR_PATH

    # ---------------- Process ----------------

    def _run_tool(self, source_text: str) -> str:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "source.dart"
            path.write_text(source_text, encoding="utf-8")

            try:
                proc = subprocess.run(
                    [self.executable, str(path)],
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    check=False,
                )
            except OSError as e:
                logger.error("Could not start AST extractor %s: %s", self.executable, e)
                raise ExtractionToolError(
                    f"Dart AST parser failed to start ({self.executable})", str(e)
                ) from e

        if proc.returncode != 0:
            logger.error("AST extractor exited with %d", proc.returncode)
            raise ExtractionToolError(
                f"Dart AST parser failed with exit code {proc.returncode}",
                proc.stderr,
            )
        return proc.stdout

    def _decode(self, stdout: str) -> List[ToolClass]:
        try:
            return _TOOL_OUTPUT.validate_json(stdout or "")
        except ValidationError as e:
            raise MalformedExtractionOutput(
                "Dart AST parser failed: unexpected output",
                f"{e.error_count()} problem(s), first: {e.errors()[0]['msg']}; output: {stdout[:200]!r}",
            ) from e

    # ---------------- Mapping ----------------

    @staticmethod
    def _body_marker(m: ToolMethod) -> str:
        # the helper reports async-ness separately from the body text
        if not m.isAsync or m.body.lstrip().startswith(("async", "sync*")):
            return ""
        return "async"

    def _to_parsed_class(self, cls: ToolClass) -> ParsedClass:
        fields = tuple(
            FieldDescriptor(type=f.type, name=f.name)
            for f in cls.fields
            if is_exported(f.name, cls.name)
        )
        methods = tuple(
            MethodDescriptor(
                name=m.name,
                return_type=m.returnType,
                params=m.params,
                body=m.body,
                is_getter=m.isGetter,
                is_setter=m.isSetter and not m.isGetter,
                is_static=m.isStatic,
                is_async=m.isAsync,
                body_marker=self._body_marker(m),
            )
            for m in cls.methods
            if not m.isStatic and is_exported(m.name, cls.name)
        )
        return ParsedClass(header=ClassHeader(name=cls.name), fields=fields, methods=methods)

    def extract(self, source_text: str) -> Optional[ParsedClass]:
        classes = self._decode(self._run_tool(source_text))
        if not classes:
            return None
        return self._to_parsed_class(classes[0])
