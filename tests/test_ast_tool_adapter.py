import json
import subprocess
from pathlib import Path

import pytest

from abstract_extractor import convert
from abstract_extractor.adapters import ast_tool_adapter
from abstract_extractor.adapters.ast_tool_adapter import AstToolDartAdapter
from abstract_extractor.errors import ExtractionToolError, MalformedExtractionOutput


def make_payload(name="UserRepository", fields=(), methods=()):
    """JSON the extractor binary would print for a single class."""
    return json.dumps([
        {
            "name": name,
            "fields": list(fields),
            "methods": [{"isGetter": False, "isSetter": False, **m} for m in methods],
        }
    ])


@pytest.fixture
def fake_tool(monkeypatch):
    """Replace subprocess.run; records (cmd, file content) for every call."""
    calls = []
    outcome = {"stdout": "[]", "stderr": "", "returncode": 0, "raises": None}

    def run(cmd, **kwargs):
        calls.append((cmd, Path(cmd[-1]).read_text(encoding="utf-8")))
        if outcome["raises"] is not None:
            raise outcome["raises"]
        return subprocess.CompletedProcess(
            cmd, outcome["returncode"], stdout=outcome["stdout"], stderr=outcome["stderr"]
        )

    monkeypatch.setattr(ast_tool_adapter.subprocess, "run", run)
    return calls, outcome


def adapter():
    return AstToolDartAdapter(executable="/opt/tools/ast_extractor")


# ---------------- Process ----------------

def test_source_is_written_to_a_temp_file_passed_to_the_tool(fake_tool):
    calls, outcome = fake_tool
    outcome["stdout"] = make_payload(name="Foo")

    convert("class Foo {}", "I", "Impl", adapter=adapter())

    assert len(calls) == 1
    cmd, written = calls[0]
    assert cmd[0] == "/opt/tools/ast_extractor"
    assert cmd[1].endswith(".dart")
    assert written == "class Foo {}"


def test_no_classes_gives_none(fake_tool):
    _, outcome = fake_tool
    outcome["stdout"] = "[]"
    assert convert("class Foo {}", adapter=adapter()) is None


def test_non_zero_exit_raises_with_stderr(fake_tool):
    _, outcome = fake_tool
    outcome["returncode"] = 1
    outcome["stderr"] = "unexpected token"

    with pytest.raises(ExtractionToolError) as exc:
        convert("class Foo {}", adapter=adapter())
    assert "Dart AST parser failed" in str(exc.value)
    assert "unexpected token" in str(exc.value)
    assert exc.value.stderr == "unexpected token"


def test_missing_binary_raises(fake_tool):
    _, outcome = fake_tool
    outcome["raises"] = FileNotFoundError(2, "No such file or directory")

    with pytest.raises(ExtractionToolError) as exc:
        convert("class Foo {}", adapter=adapter())
    assert "Dart AST parser failed" in str(exc.value)


@pytest.mark.parametrize("stdout", ["not json", '{"name": "Foo"}', '[{"fields": []}]', ""])
def test_malformed_output(fake_tool, stdout):
    _, outcome = fake_tool
    outcome["stdout"] = stdout

    with pytest.raises(MalformedExtractionOutput) as exc:
        convert("class Foo {}", adapter=adapter())
    assert isinstance(exc.value, ExtractionToolError)
    assert "Dart AST parser failed" in str(exc.value)


# ---------------- Mapping ----------------

def test_fields_and_methods_are_generated(fake_tool):
    _, outcome = fake_tool
    outcome["stdout"] = make_payload(
        name="User",
        fields=[{"name": "id", "type": "String"}, {"name": "name", "type": "String"}],
        methods=[{"name": "fetchUser", "returnType": "void", "params": "()", "body": "{}"}],
    )

    result = convert("class User {}", "I", "Impl", adapter=adapter())

    assert "String get id;" in result.interface_text
    assert "void fetchUser();" in result.interface_text
    assert "final String id;" in result.concrete_text
    assert "void fetchUser() {}" in result.concrete_text
    assert "UserImpl(this.id, this.name);" in result.concrete_text


def test_getters_setters_and_private_members(fake_tool):
    _, outcome = fake_tool
    outcome["stdout"] = make_payload(
        name="Repo",
        fields=[{"name": "_cache", "type": "Map<String, int>"}],
        methods=[
            {"name": "count", "returnType": "int", "params": "", "body": "=> _count;", "isGetter": True},
            {"name": "value", "returnType": "void", "params": "(String v)", "body": "{}", "isSetter": True},
            {"name": "_reset", "returnType": "void", "params": "()", "body": "{}"},
            {"name": "Repo", "returnType": "", "params": "()", "body": "{}"},
        ],
    )

    result = convert("class Repo {}", adapter=adapter())

    assert "int get count;" in result.interface_text
    assert "int get count => _count;" in result.concrete_text
    assert "set value" not in result.interface_text
    assert "_cache" not in result.interface_text + result.concrete_text
    assert "_reset" not in result.interface_text + result.concrete_text
    assert "Repo(" not in result.concrete_text
    assert "RepoImpl(" not in result.concrete_text


def test_async_methods_keep_their_marker(fake_tool):
    _, outcome = fake_tool
    outcome["stdout"] = make_payload(
        name="Loader",
        methods=[
            {"name": "load", "returnType": "Future<void>", "params": "()",
             "body": "{ await fetch(); }", "isAsync": True},
            {"name": "reload", "returnType": "Future<void>", "params": "()",
             "body": "async { await load(); }", "isAsync": True},
        ],
    )

    result = convert("class Loader {}", adapter=adapter())

    assert "  Future<void> load();" in result.interface_text
    assert "Future<void> load() async { await fetch(); }" in result.concrete_text
    assert "Future<void> reload() async { await load(); }" in result.concrete_text
    assert "async async" not in result.concrete_text
