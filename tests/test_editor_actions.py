import pytest

from abstract_extractor.editor_actions import (
    CONVERT_ACTION_TITLE,
    apply_action,
    code_actions,
    resolve_action,
    selected_text,
)

DOC = "import 'x.dart';\n\nclass A {}\n\nvoid main() {}\n"
OUT = "abstract class IA {\n}\n\nclass AImpl implements IA {\n}"


def class_selection():
    start = DOC.index("class A {}")
    return start, start + len("class A {}")


def test_code_actions_only_for_documents_with_a_class():
    assert code_actions(DOC) == [CONVERT_ACTION_TITLE]
    assert code_actions("void main() {}") == []


def test_selected_text_falls_back_to_whole_document():
    assert selected_text(DOC, class_selection()) == "class A {}"
    assert selected_text(DOC, (5, 5)) == DOC
    assert selected_text(DOC, None) == DOC


def test_replace_selection():
    result = apply_action("replace", DOC, OUT, class_selection())
    assert result.document == DOC.replace("class A {}", OUT)
    assert result.clipboard is None
    assert result.changed


def test_replace_whole_document_without_selection():
    result = apply_action("replace", DOC, OUT)
    assert result.document == OUT


def test_insert_below_selection_and_at_end():
    start, end = class_selection()
    below = apply_action("insert_below", DOC, OUT, (start, end))
    assert below.document == DOC[:end] + "\n\n" + OUT + DOC[end:]

    at_end = apply_action("insert_below", DOC, OUT, (3, 3))
    assert at_end.document == DOC + "\n\n" + OUT


def test_clipboard_leaves_document_untouched():
    result = apply_action("Copy to clipboard", DOC, OUT, class_selection())
    assert result.document == DOC
    assert result.clipboard == OUT
    assert not result.changed


def test_quick_pick_labels_and_ids_resolve():
    assert resolve_action("Replace current class") == "replace"
    assert resolve_action("Insert below") == "insert_below"
    assert resolve_action("CLIPBOARD") == "clipboard"
    with pytest.raises(ValueError):
        resolve_action("delete everything")
