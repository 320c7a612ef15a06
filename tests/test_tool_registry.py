"""
Tests for sparky/ai/tools/registry.py and the function declarations.

The host is either the in-memory Notebook or a MagicMock; no network.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from sparky.ai.tools import FUNCTION_DECLARATIONS, DomainContext, FunctionName, ToolRegistry
from sparky.models import AppSettings


# --------------------------------------------------------------------------- #
# 1. Declarations                                                              #
# --------------------------------------------------------------------------- #

def test_every_function_is_declared():
    names = [d["name"] for d in FUNCTION_DECLARATIONS]
    assert len(names) == len(set(names))
    assert set(names) == {f.value for f in FunctionName}


def test_declarations_have_required_keys():
    for decl in FUNCTION_DECLARATIONS:
        assert decl["description"].strip()
        params = decl["parameters"]
        assert params["type"] == "object"
        assert set(params["required"]) <= set(params["properties"])


def test_required_parameters():
    required = {d["name"]: d["parameters"]["required"] for d in FUNCTION_DECLARATIONS}
    assert required["createNote"] == ["title", "content"]
    assert required["editNote"] == ["noteId"]
    assert required["setReminder"] == ["noteId", "time"]
    assert required["getAppStatus"] == []


def test_registry_tools_wraps_declarations():
    reg = ToolRegistry()
    assert reg.declarations is FUNCTION_DECLARATIONS
    assert reg.tools == [{"functionDeclarations": FUNCTION_DECLARATIONS}]


# --------------------------------------------------------------------------- #
# 2. Dispatch                                                                  #
# --------------------------------------------------------------------------- #

def test_unknown_function_result():
    reg = ToolRegistry()
    ctx = DomainContext(MagicMock(), notes=[], settings=AppSettings())
    assert reg.dispatch("launchRocket", {}, ctx) == {
        "success": False,
        "error": "Unknown function: launchRocket",
    }


@pytest.mark.parametrize("name", [f.value for f in FunctionName])
def test_every_function_returns_serialisable_result(name, ctx):
    result = ToolRegistry().dispatch(name, {}, ctx)
    assert isinstance(result["success"], bool)
    json.dumps(result)


def test_dispatch_routes_to_executor(ctx, notebook):
    result = ToolRegistry().dispatch("toggleNoteStatus", {"noteId": "n2", "status": "completed"}, ctx)
    assert result["newValue"] is False
    assert next(n for n in notebook.get_notes() if n.id == "n2").is_completed is False


def test_none_args_treated_as_empty(ctx):
    result = ToolRegistry().dispatch("getAppStatus", None, ctx)
    assert result["status"]["totalNotes"] == 3


def test_host_failure_becomes_error_result():
    host = MagicMock()
    host.create_note.side_effect = RuntimeError("disk full")
    ctx = DomainContext(host, notes=[], settings=AppSettings())

    result = ToolRegistry().dispatch("createNote", {"title": "x", "content": "y"}, ctx)

    assert result["success"] is False
    assert "disk full" in result["error"]
    assert ctx.notes == []
