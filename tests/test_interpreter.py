#!/usr/bin/env python3
"""
Unit тесты для interpreter.py
"""

import pytest

from uigen_mcp.interpreter import ToolCommandInterpreter
from uigen_mcp.models.tool_invocation import ToolInvocation
from uigen_mcp.vfs.file_system import VirtualFileSystem


def make_invocation(tool_name, **args):
    return ToolInvocation(tool_call_id="call_1", tool_name=tool_name, args=args)


class TestToolCommandInterpreter:
    """Тесты для ToolCommandInterpreter"""

    @pytest.fixture
    def file_system(self):
        return VirtualFileSystem({"/App.jsx": "const a = 1;\nconst b = 1;\n"})

    @pytest.fixture
    def interpreter(self, file_system):
        return ToolCommandInterpreter(file_system)

    @pytest.mark.asyncio
    async def test_create(self, interpreter, file_system):
        """Тест команды create"""
        invocation = await interpreter.apply(
            make_invocation("str_replace_editor", command="create", path="/index.js", file_text="x")
        )
        assert invocation.state == "result"
        assert invocation.result.success
        assert file_system.read("/index.js") == "x"

    @pytest.mark.asyncio
    async def test_create_accepts_content_alias(self, interpreter, file_system):
        """Тест алиаса content для create"""
        await interpreter.apply(make_invocation("str_replace_editor", command="create", path="/a.js", content="y"))
        assert file_system.read("/a.js") == "y"

    @pytest.mark.asyncio
    async def test_view_does_not_mutate(self, interpreter, file_system):
        """Тест: view не изменяет файловую систему"""
        before = file_system.serialize()
        invocation = await interpreter.apply(make_invocation("str_replace_editor", command="view", path="/App.jsx"))
        assert invocation.result.success
        assert "const a = 1;" in invocation.result.output
        assert file_system.serialize() == before

    @pytest.mark.asyncio
    async def test_str_replace_unique(self, interpreter, file_system):
        """Тест str_replace с уникальной подстрокой"""
        invocation = await interpreter.apply(
            make_invocation("str_replace_editor", command="str_replace", path="/App.jsx", old_str="a = 1", new_str="a = 2")
        )
        assert invocation.result.success
        assert file_system.read("/App.jsx") == "const a = 2;\nconst b = 1;\n"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("old_str,error_type", [("c = 1", "NotFound"), ("= 1", "AmbiguousMatch")])
    async def test_str_replace_failures_leave_content(self, interpreter, file_system, old_str, error_type):
        """Тест: ошибки str_replace не изменяют содержимое"""
        invocation = await interpreter.apply(
            make_invocation("str_replace_editor", command="str_replace", path="/App.jsx", old_str=old_str, new_str="z")
        )
        assert invocation.state == "result"
        assert not invocation.result.success
        assert invocation.result.error.type == error_type
        assert file_system.read("/App.jsx") == "const a = 1;\nconst b = 1;\n"

    @pytest.mark.asyncio
    async def test_insert_invalid_line(self, interpreter, file_system):
        """Тест insert с недопустимой строкой"""
        invocation = await interpreter.apply(
            make_invocation("str_replace_editor", command="insert", path="/App.jsx", insert_line=-1, new_str="x")
        )
        assert invocation.result.error.type == "InvalidLine"

    @pytest.mark.asyncio
    async def test_rename_and_delete(self, interpreter, file_system):
        """Тест команд file_manager"""
        renamed = await interpreter.apply(make_invocation("file_manager", command="rename", path="/App.jsx", new_path="/Main.jsx"))
        assert renamed.result.success
        deleted = await interpreter.apply(make_invocation("file_manager", command="delete", path="/Main.jsx"))
        assert deleted.result.success
        assert file_system.list() == []

    @pytest.mark.asyncio
    async def test_delete_missing_reports_not_found(self, interpreter):
        """Тест удаления несуществующего файла"""
        invocation = await interpreter.apply(make_invocation("file_manager", command="delete", path="/missing.js"))
        assert invocation.result.error.type == "NotFound"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "tool_name,args",
        [
            ("str_replace_editor", {"command": "undo_edit", "path": "/App.jsx"}),
            ("str_replace_editor", {"command": "str_replace", "path": "/App.jsx"}),
            ("str_replace_editor", {"command": "insert", "path": "/App.jsx", "new_str": "x"}),
            ("str_replace_editor", {"path": "/App.jsx"}),
            ("file_manager", {"command": "rename", "path": "/App.jsx"}),
            ("file_manager", {"command": "create", "path": "/App.jsx"}),
            ("bash", {"command": "ls", "path": "/"}),
        ],
    )
    async def test_unsupported_commands(self, interpreter, file_system, tool_name, args):
        """Тест: неизвестные команды и некорректные аргументы дают UnsupportedCommand"""
        before = file_system.serialize()
        invocation = await interpreter.apply(make_invocation(tool_name, **args))
        assert invocation.state == "result"
        assert invocation.result.error.type == "UnsupportedCommand"
        assert file_system.serialize() == before

    @pytest.mark.asyncio
    async def test_invalid_path_is_embedded(self, interpreter):
        """Тест: InvalidPath возвращается в результате"""
        invocation = await interpreter.apply(make_invocation("str_replace_editor", command="view", path="/a/../b"))
        assert invocation.result.error.type == "InvalidPath"

    @pytest.mark.asyncio
    async def test_completed_invocation_cannot_be_applied_again(self, interpreter, file_system):
        """Тест: переход pending -> result происходит один раз"""
        invocation = await interpreter.apply(
            make_invocation("str_replace_editor", command="insert", path="/App.jsx", insert_line=0, new_str="NEW")
        )
        after_first = file_system.read("/App.jsx")
        first_result = invocation.result

        with pytest.raises(ValueError):
            await interpreter.apply(invocation)

        assert after_first == "NEW\nconst a = 1;\nconst b = 1;\n"
        assert file_system.read("/App.jsx") == after_first
        assert invocation.state == "result"
        assert invocation.result == first_result

    @pytest.mark.asyncio
    async def test_result_wire_shape(self, interpreter):
        """Тест формата результата на проводе"""
        invocation = await interpreter.apply(make_invocation("file_manager", command="delete", path="/missing.js"))
        wire = invocation.to_wire()
        assert wire["toolName"] == "file_manager"
        assert wire["toolCallId"] == "call_1"
        assert wire["state"] == "result"
        assert wire["result"]["success"] is False
        assert wire["result"]["error"]["type"] == "NotFound"
