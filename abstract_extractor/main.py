# abstract_extractor/main.py

from __future__ import annotations

import logging
from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException  # type: ignore
from pydantic import BaseModel  # type: ignore

from . import config
from .converter import convert
from .detect import accepts_as_dart, detect_language
from .editor_actions import apply_action, code_actions, selected_text
from .errors import ExtractionToolError
from .registry import get_adapter

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Dart Abstract Class Extractor", version="0.3.0")

NOT_DART_MESSAGE = "This command only works with Dart files!"
NO_CLASS_MESSAGE = "No valid Dart class found!"


# ==============================================================================
# Models
# ==============================================================================
class Selection(BaseModel):
    start: int
    end: int


class DetectReq(BaseModel):
    code: str
    filename: Optional[str] = None
    language_id: Optional[str] = None


class CodeActionsReq(DetectReq):
    pass


class ConvertReq(BaseModel):
    code: str
    filename: Optional[str] = None
    language_id: Optional[str] = None      # editor language id, e.g. "dart"
    selection: Optional[Selection] = None
    interface_prefix: Optional[str] = None
    implementation_suffix: Optional[str] = None
    strategy: Optional[Literal["regex", "ast"]] = None
    # Either the action id or the quick-pick label
    action: Optional[str] = None


class ConvertResp(BaseModel):
    interface_class: str
    concrete_class: str
    output: str
    action: Optional[str] = None
    document: Optional[str] = None
    clipboard: Optional[str] = None
    changed: Optional[bool] = None          # whether the action edited the document
    message: str = "Interface and implementation created successfully!"


# ==============================================================================
# Utilities
# ==============================================================================
def _ensure_dart(code: str, filename: Optional[str], language_id: Optional[str]) -> None:
    lang, conf, source = detect_language(code, filename, language_id)
    if not accepts_as_dart(lang):
        logger.info("Rejected %s input (confidence %.2f via %s)", lang, conf, source)
        raise HTTPException(status_code=400, detail=NOT_DART_MESSAGE)


# ==============================================================================
# Routes
# ==============================================================================
@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/detect")
def detect(req: DetectReq):
    lang, conf, source = detect_language(req.code, req.filename, req.language_id)
    return {
        "language": lang,
        "confidence": conf,
        "source": source
    }


@app.post("/code-actions")
def list_code_actions(req: CodeActionsReq) -> dict:
    lang, _, _ = detect_language(req.code, req.filename, req.language_id)
    actions: List[str] = code_actions(req.code) if accepts_as_dart(lang) else []
    return {"actions": actions}


@app.post("/convert", response_model=ConvertResp)
def convert_class(req: ConvertReq) -> ConvertResp:
    _ensure_dart(req.code, req.filename, req.language_id)

    selection = (req.selection.start, req.selection.end) if req.selection else None
    text = selected_text(req.code, selection)

    prefix = req.interface_prefix if req.interface_prefix is not None else config.INTERFACE_PREFIX
    suffix = (
        req.implementation_suffix
        if req.implementation_suffix is not None
        else config.IMPLEMENTATION_SUFFIX
    )

    try:
        result = convert(text, prefix, suffix, adapter=get_adapter(req.strategy))
    except ExtractionToolError as e:
        raise HTTPException(status_code=500, detail=f"Error: {e}") from e

    if result is None:
        raise HTTPException(status_code=422, detail=NO_CLASS_MESSAGE)

    resp = ConvertResp(
        interface_class=result.interface_text,
        concrete_class=result.concrete_text,
        output=result.full_output,
    )

    if req.action:
        try:
            applied = apply_action(req.action, req.code, result.full_output, selection)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        resp.action = req.action
        resp.document = applied.document
        resp.clipboard = applied.clipboard
        resp.changed = applied.changed
        if applied.clipboard is not None:
            resp.message = "Code copied to clipboard!"

    return resp
