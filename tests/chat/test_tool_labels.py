#!/usr/bin/env python3
"""
Unit тесты для chat/tool_labels.py
"""

import pytest

from uigen_mcp.chat.tool_labels import describe
from uigen_mcp.models.tool_invocation import ToolInvocation, ToolResult


def invocation(tool_name, complete=False, **args):
    inv = ToolInvocation(tool_call_id="call_1", tool_name=tool_name, args=args)
    if complete:
        inv.complete(ToolResult.ok("ok"))
    return inv


@pytest.mark.parametrize(
    "command,pending,complete",
    [
        ("create", "Writing App.jsx...", "Wrote App.jsx"),
        ("view", "Reading App.jsx...", "Read App.jsx"),
        ("str_replace", "Editing App.jsx...", "Edited App.jsx"),
        ("insert", "Editing App.jsx...", "Edited App.jsx"),
        ("undo_edit", "Working on App.jsx...", "Updated App.jsx"),
    ],
)
def test_editor_labels(command, pending, complete):
    """Тест подписей для str_replace_editor"""
    assert describe(invocation("str_replace_editor", command=command, path="/App.jsx")) == pending
    assert describe(invocation("str_replace_editor", True, command=command, path="/App.jsx")) == complete


def test_file_manager_labels():
    """Тест подписей для file_manager"""
    rename = dict(command="rename", path="/a.jsx", new_path="/components/b.jsx")
    assert describe(invocation("file_manager", **rename)) == "Renaming file..."
    assert describe(invocation("file_manager", True, **rename)) == "Renamed to b.jsx"
    assert describe(invocation("file_manager", command="delete", path="/a.jsx")) == "Removing file..."
    assert describe(invocation("file_manager", True, command="delete", path="/a.jsx")) == "Removed file"
    assert describe(invocation("file_manager", command="chmod", path="/a.jsx")) == "Processing file..."


def test_missing_args_and_unknown_tool():
    """Тест отсутствующих аргументов и неизвестного инструмента"""
    assert describe(invocation("str_replace_editor", command="create")) == "Writing file..."
    assert describe(invocation("unknown_tool")) == "Working..."
    assert describe(invocation("unknown_tool", True)) == "Done"


def test_nested_path_uses_file_name():
    """Тест извлечения имени файла из вложенного пути"""
    label = describe(invocation("str_replace_editor", command="create", path="/src/components/ui/Button.tsx"))
    assert label == "Writing Button.tsx..."
