"""
What the editor does with a conversion result.

The three choices offered after a conversion:
  - replace        the selection, or the whole document when nothing is selected
  - insert_below   after the selection, or at the end of the document
  - clipboard      leave the document alone, hand the text to the clipboard
"""

from typing import List, Optional, Tuple

from .model import ActionResult

CONVERT_ACTION_TITLE = "Convert to Abstract Class"

ACTION_REPLACE = "replace"
ACTION_INSERT_BELOW = "insert_below"
ACTION_CLIPBOARD = "clipboard"

# quick-pick labels -> action ids
ACTION_LABELS = {
    "Replace current class": ACTION_REPLACE,
    "Insert below": ACTION_INSERT_BELOW,
    "Copy to clipboard": ACTION_CLIPBOARD,
}

Selection = Tuple[int, int]


def code_actions(document: str) -> List[str]:
    """Quick-fix titles offered for a document: only when it declares a class."""
    if "class " not in document:
        return []
    return [CONVERT_ACTION_TITLE]


def _clamp(document: str, selection: Optional[Selection]) -> Optional[Selection]:
    if selection is None:
        return None
    start, end = sorted(selection)
    n = len(document)
    return max(0, min(start, n)), max(0, min(end, n))


def selected_text(document: str, selection: Optional[Selection]) -> str:
    """The text to convert: the selection when non-empty, else the whole document."""
    sel = _clamp(document, selection)
    if sel and sel[0] != sel[1]:
        return document[sel[0]:sel[1]]
    return document


def resolve_action(action: str) -> str:
    key = (action or "").strip()
    if key in ACTION_LABELS:
        return ACTION_LABELS[key]
    key = key.lower()
    if key in ACTION_LABELS.values():
        return key
    raise ValueError(f"Unknown action: {action!r}")


def apply_action(
    action: str,
    document: str,
    output: str,
    selection: Optional[Selection] = None,
) -> ActionResult:
    action = resolve_action(action)
    sel = _clamp(document, selection)
    has_selection = bool(sel and sel[0] != sel[1])

    if action == ACTION_REPLACE:
        if has_selection:
            new_doc = document[:sel[0]] + output + document[sel[1]:]
        else:
            new_doc = output
        return ActionResult(document=new_doc, changed=new_doc != document)

    if action == ACTION_INSERT_BELOW:
        pos = sel[1] if has_selection else len(document)
        new_doc = document[:pos] + "\n\n" + output + document[pos:]
        return ActionResult(document=new_doc, changed=True)

    return ActionResult(document=document, clipboard=output, changed=False)
