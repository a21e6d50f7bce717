# abstract_extractor/config.py

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv  # type: ignore

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent

DEFAULT_INTERFACE_PREFIX = "I"
DEFAULT_IMPLEMENTATION_SUFFIX = "Impl"

# unset -> default; an explicitly empty value is kept
INTERFACE_PREFIX = os.getenv("INTERFACE_PREFIX", DEFAULT_INTERFACE_PREFIX)
IMPLEMENTATION_SUFFIX = os.getenv("IMPLEMENTATION_SUFFIX", DEFAULT_IMPLEMENTATION_SUFFIX)

# "regex" (in-process scanner) or "ast" (external ast_extractor binary)
EXTRACTION_STRATEGY = (os.getenv("EXTRACTION_STRATEGY") or "").strip().lower() or "regex"

_AST_BINARY = "ast_extractor.exe" if sys.platform == "win32" else "ast_extractor"
AST_EXTRACTOR_PATH = (os.getenv("AST_EXTRACTOR_PATH") or "").strip() or str(BASE_DIR / "bin" / _AST_BINARY)

LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
