#!/usr/bin/env python3
"""
Unit тесты для chat/orchestrator.py
"""

import asyncio

import pytest

from uigen_mcp.chat.orchestrator import ChatSessionOrchestrator, ChatStatus, TurnInProgressError
from uigen_mcp.models.chat import (
    ChatMessage,
    ErrorEvent,
    FinishEvent,
    ReasoningDeltaEvent,
    StepStartEvent,
    StepStartPart,
    TextDeltaEvent,
    ToolCallEvent,
)
from uigen_mcp.models.tool_invocation import ToolInvocation
from uigen_mcp.utils.anon_work_store import AnonWorkStore
from uigen_mcp.vfs.file_system import VirtualFileSystem


class FakeTransport:
    """Транспорт, воспроизводящий заранее заданные события"""

    def __init__(self, *turns, gate: asyncio.Event | None = None):
        self.turns = list(turns)
        self.requests = []
        self.gate = gate

    async def stream(self, request):
        self.requests.append(request)
        events = self.turns.pop(0) if self.turns else []
        for event in events:
            if self.gate is not None and isinstance(event, FinishEvent):
                await self.gate.wait()
            await asyncio.sleep(0)
            yield event


def create(path, text, call_id):
    return ToolCallEvent(
        tool_call_id=call_id,
        tool_name="str_replace_editor",
        args={"command": "create", "path": path, "file_text": text},
    )


class TestChatSessionOrchestrator:
    """Тесты для ChatSessionOrchestrator"""

    @pytest.mark.asyncio
    async def test_turn_builds_assistant_message(self):
        """Тест: события потока собираются в сообщение ассистента"""
        transport = FakeTransport(
            [
                ReasoningDeltaEvent(delta="thinking"),
                StepStartEvent(),
                TextDeltaEvent(delta="Creating "),
                TextDeltaEvent(delta="the app"),
                create("/App.jsx", "export default () => null;", "call_1"),
                FinishEvent(finish_reason="stop"),
            ]
        )
        chat = ChatSessionOrchestrator(transport=transport)

        assistant = await chat.submit("Build a counter")

        assert chat.status == ChatStatus.READY
        assert [m.role for m in chat.messages] == ["user", "assistant"]
        assert chat.messages[0].text == "Build a counter"
        assert assistant.parts[0].type == "reasoning"
        assert isinstance(assistant.parts[1], StepStartPart)
        assert assistant.text == "Creating the app"
        invocation = assistant.tool_invocations[0]
        assert invocation.state == "result"
        assert invocation.result.success
        assert chat.file_system.read("/App.jsx") == "export default () => null;"

    @pytest.mark.asyncio
    async def test_blank_input_is_ignored(self):
        """Тест: пустой ввод не отправляется"""
        transport = FakeTransport()
        chat = ChatSessionOrchestrator(transport=transport)
        assert await chat.submit("   ") is None
        assert transport.requests == []
        assert chat.messages == []

    @pytest.mark.asyncio
    async def test_tool_calls_applied_in_arrival_order(self):
        """Тест: вызовы инструментов применяются по порядку поступления"""
        transport = FakeTransport(
            [
                create("/App.jsx", "first", "call_1"),
                ToolCallEvent(
                    tool_call_id="call_2",
                    tool_name="str_replace_editor",
                    args={"command": "str_replace", "path": "/App.jsx", "old_str": "first", "new_str": "second"},
                ),
                create("/App.jsx", "third", "call_3"),
                ToolCallEvent(
                    tool_call_id="call_4",
                    tool_name="file_manager",
                    args={"command": "rename", "path": "/App.jsx", "new_path": "/Main.jsx"},
                ),
            ]
        )
        chat = ChatSessionOrchestrator(transport=transport)

        assistant = await chat.submit("go")

        assert [i.tool_call_id for i in assistant.tool_invocations] == ["call_1", "call_2", "call_3", "call_4"]
        assert all(i.result.success for i in assistant.tool_invocations)
        assert chat.file_system.serialize() == {"/Main.jsx": {"type": "file", "content": "third"}}

    @pytest.mark.asyncio
    async def test_failed_tool_call_is_transcript_data(self):
        """Тест: ошибка инструмента попадает в транскрипт, а не в исключение"""
        transport = FakeTransport(
            [ToolCallEvent(tool_call_id="call_1", tool_name="file_manager", args={"command": "delete", "path": "/x.js"})]
        )
        chat = ChatSessionOrchestrator(transport=transport)

        assistant = await chat.submit("delete it")

        assert chat.status == ChatStatus.READY
        assert assistant.tool_invocations[0].result.error.type == "NotFound"

    @pytest.mark.asyncio
    async def test_request_carries_latest_snapshot(self):
        """Тест: каждый запрос содержит актуальный снимок"""
        transport = FakeTransport([create("/App.jsx", "v1", "call_1")], [])
        chat = ChatSessionOrchestrator(transport=transport, project_id="p1")

        await chat.submit("first")
        await chat.submit("second")

        assert transport.requests[0].files == {}
        assert transport.requests[1].files == {"/App.jsx": {"type": "file", "content": "v1"}}
        assert transport.requests[1].project_id == "p1"
        assert [m.role for m in transport.requests[1].messages] == ["user", "assistant", "user"]
        assert transport.requests[1].to_wire()["projectId"] == "p1"

    @pytest.mark.asyncio
    async def test_rejects_submission_during_active_turn(self):
        """Тест: новая отправка во время активного хода отклоняется"""
        gate = asyncio.Event()
        transport = FakeTransport([TextDeltaEvent(delta="hi"), FinishEvent()], gate=gate)
        chat = ChatSessionOrchestrator(transport=transport)

        turn = asyncio.create_task(chat.submit("first"))
        while chat.status != ChatStatus.STREAMING:
            await asyncio.sleep(0)

        with pytest.raises(TurnInProgressError):
            await chat.submit("second")

        gate.set()
        await turn
        assert chat.status == ChatStatus.READY
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_cancel_keeps_applied_mutations(self):
        """Тест: отмена останавливает поток, но не откатывает изменения"""
        gate = asyncio.Event()
        transport = FakeTransport(
            [create("/App.jsx", "kept", "call_1"), FinishEvent(), create("/Late.jsx", "never", "call_2")],
            gate=gate,
        )
        chat = ChatSessionOrchestrator(transport=transport)

        turn = asyncio.create_task(chat.submit("go"))
        while not chat.file_system.is_file("/App.jsx"):
            await asyncio.sleep(0)

        assert chat.cancel() is True
        assistant = await turn

        assert chat.status == ChatStatus.READY
        assert chat.file_system.read("/App.jsx") == "kept"
        assert not chat.file_system.is_file("/Late.jsx")
        assert [i.tool_call_id for i in assistant.tool_invocations] == ["call_1"]
        assert chat.cancel() is False

    @pytest.mark.asyncio
    async def test_stream_error_sets_error_status(self):
        """Тест: ошибка потока переводит статус в error"""
        transport = FakeTransport([TextDeltaEvent(delta="partial"), ErrorEvent(error="upstream failed")], [])
        chat = ChatSessionOrchestrator(transport=transport)

        await chat.submit("go")

        assert chat.status == ChatStatus.ERROR
        assert "upstream failed" in str(chat.error)

        await chat.submit("retry")
        assert chat.status == ChatStatus.READY
        assert chat.error is None

    @pytest.mark.asyncio
    async def test_tracks_anonymous_work_without_project(self):
        """Тест: анонимная работа сохраняется без projectId"""
        store = AnonWorkStore()
        transport = FakeTransport([create("/App.jsx", "anon", "call_1")])
        chat = ChatSessionOrchestrator(transport=transport, anon_work_store=store)

        await chat.submit("hello")

        buffer = store.get()
        assert buffer is not None
        assert [m["role"] for m in buffer.messages] == ["user", "assistant"]
        assert buffer.file_system_data == {"/App.jsx": {"type": "file", "content": "anon"}}

    @pytest.mark.asyncio
    async def test_does_not_track_anonymous_work_with_project(self):
        """Тест: при наличии projectId анонимная работа не сохраняется"""
        store = AnonWorkStore()
        transport = FakeTransport([create("/App.jsx", "owned", "call_1")])
        chat = ChatSessionOrchestrator(transport=transport, anon_work_store=store, project_id="p1")

        await chat.submit("hello")

        assert store.get() is None

    @pytest.mark.asyncio
    async def test_initial_state(self):
        """Тест начального состояния"""
        history = [ChatMessage.user("earlier")]
        fs = VirtualFileSystem({"/App.jsx": "x"})
        chat = ChatSessionOrchestrator(file_system=fs, initial_messages=history, project_id="p1")

        assert chat.status == ChatStatus.READY
        assert chat.messages == history
        assert chat.build_request().files == {"/App.jsx": {"type": "file", "content": "x"}}

    @pytest.mark.asyncio
    async def test_apply_tool_call_uses_queue(self):
        """Тест прямого применения вызова инструмента"""
        store = AnonWorkStore()
        chat = ChatSessionOrchestrator(anon_work_store=store)

        invocation = await chat.apply_tool_call(
            "str_replace_editor", {"command": "create", "path": "/App.jsx", "file_text": "x"}
        )

        assert invocation.result.success
        assert chat.file_system.read("/App.jsx") == "x"
        # Без сообщений анонимный буфер не создается.
        assert store.get() is None
        await chat.close()

    @pytest.mark.asyncio
    async def test_bind_project_stops_anonymous_tracking(self):
        """Тест: после привязки к проекту буфер больше не обновляется"""
        store = AnonWorkStore()
        transport = FakeTransport(
            [create("/App.jsx", "first", "call_1")],
            [create("/App.jsx", "second", "call_2")],
        )
        chat = ChatSessionOrchestrator(transport=transport, anon_work_store=store)

        await chat.submit("first")
        chat.bind_project("p1")
        await chat.submit("second")

        assert chat.build_request().project_id == "p1"
        assert chat.file_system.read("/App.jsx") == "second"
        assert store.get().file_system_data == {"/App.jsx": {"type": "file", "content": "first"}}

    @pytest.mark.asyncio
    async def test_close_drains_queue(self):
        """Тест: close применяет оставшиеся вызовы"""
        chat = ChatSessionOrchestrator()
        future = chat.tool_queue.enqueue(
            chat_invocation("call_1", {"command": "create", "path": "/a.jsx", "file_text": "a"})
        )

        await chat.close()

        assert future.done()
        assert chat.file_system.read("/a.jsx") == "a"
        assert chat.tool_queue.pending == 0


def chat_invocation(call_id, args):
    return ToolInvocation(tool_call_id=call_id, tool_name="str_replace_editor", args=args)
