from typing import Dict, Optional, Type

from . import config
from .adapters.ast_tool_adapter import AstToolDartAdapter
from .adapters.base import BaseAdapter
from .adapters.regex_adapter import RegexDartAdapter

ADAPTERS: Dict[str, Type[BaseAdapter]] = {
    RegexDartAdapter.name: RegexDartAdapter,
    AstToolDartAdapter.name: AstToolDartAdapter,
}


def get_adapter(name: Optional[str] = None) -> BaseAdapter:
    key = (name or config.EXTRACTION_STRATEGY).strip().lower()
    if key not in ADAPTERS:
        raise ValueError(f"Unknown extraction strategy: {key!r} (expected one of {sorted(ADAPTERS)})")
    return ADAPTERS[key]()
