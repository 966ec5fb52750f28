"""
Chat session orchestration: one transcript, one virtual file system, one
active turn at a time.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from enum import StrEnum
from typing import Any, Protocol

from uigen_mcp.chat.tool_labels import describe
from uigen_mcp.chat.tool_queue import ToolCallQueue
from uigen_mcp.interpreter import ToolCommandInterpreter
from uigen_mcp.models.chat import (
    ChatMessage,
    ErrorEvent,
    FinishEvent,
    GenerationRequest,
    ReasoningDeltaEvent,
    StepStartEvent,
    StepStartPart,
    StreamEvent,
    TextDeltaEvent,
    ToolCallEvent,
    ToolInvocationPart,
    new_id,
)
from uigen_mcp.models.tool_invocation import ToolInvocation
from uigen_mcp.utils.anon_work_store import AnonWorkStore
from uigen_mcp.vfs.file_system import VirtualFileSystem

logger = logging.getLogger(__name__)


class ChatStatus(StrEnum):
    READY = "ready"
    SUBMITTING = "submitting"
    STREAMING = "streaming"
    ERROR = "error"


class TurnInProgressError(RuntimeError):
    """Raised when a message is submitted while another turn is still open."""


class GenerationError(RuntimeError):
    """The generation stream reported an error."""


class GenerationTransport(Protocol):
    def stream(self, request: GenerationRequest) -> AsyncIterator[StreamEvent]: ...


class ChatSessionOrchestrator:
    """
    Owns the message transcript and streaming status of one chat session.

    Tool-call events of the active turn are handed to a ToolCallQueue, which
    applies them strictly in arrival order. Each outbound request carries the
    latest file system snapshot. While no project is bound, every change is
    mirrored into the anonymous work store so it can be migrated after the
    visitor authenticates.
    """

    def __init__(
        self,
        transport: GenerationTransport | None = None,
        file_system: VirtualFileSystem | None = None,
        project_id: str | None = None,
        initial_messages: Sequence[ChatMessage] | None = None,
        anon_work_store: AnonWorkStore | None = None,
        interpreter: ToolCommandInterpreter | None = None,
    ) -> None:
        self.transport = transport
        self.file_system = file_system if file_system is not None else VirtualFileSystem()
        self.interpreter = interpreter or ToolCommandInterpreter(self.file_system)
        self.tool_queue = ToolCallQueue(self.interpreter, on_applied=self._on_tool_applied)
        self.anon_work_store = anon_work_store
        self.project_id = project_id
        self.status = ChatStatus.READY
        self.error: Exception | None = None
        self._messages: list[ChatMessage] = list(initial_messages or [])
        self._stream_task: asyncio.Task | None = None
        self._cancel_requested = False

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    @property
    def is_busy(self) -> bool:
        return self.status in (ChatStatus.SUBMITTING, ChatStatus.STREAMING)

    def bind_project(self, project_id: str) -> None:
        """Attaches the session to a persisted project; anonymous tracking stops."""
        self.project_id = project_id
        logger.info(f"Chat session bound to project {project_id}")

    def build_request(self) -> GenerationRequest:
        return GenerationRequest(
            messages=self.messages,
            files=self.file_system.serialize(),
            project_id=self.project_id,
        )

    async def submit(self, text: str) -> ChatMessage | None:
        """
        Sends a user message and consumes the resulting stream.

        Returns the assistant message of the turn, or None for blank input.

        Raises:
            TurnInProgressError: If a turn is already open.
        """
        if not text or not text.strip():
            return None
        if self.is_busy:
            raise TurnInProgressError("A response is still being generated for this chat.")
        if self.transport is None:
            raise RuntimeError("No generation transport configured for this chat session.")

        self.status = ChatStatus.SUBMITTING
        self.error = None
        self._cancel_requested = False
        self._messages.append(ChatMessage.user(text))
        self._track_anon_work()

        assistant = ChatMessage(id=new_id("msg"), role="assistant")
        self._stream_task = asyncio.ensure_future(self._consume_stream(self.build_request(), assistant))
        try:
            await self._stream_task
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise
            logger.info("Turn cancelled; already applied tool calls are kept")
        except Exception as e:
            self.error = e
            self.status = ChatStatus.ERROR
            logger.error(f"Generation failed: {e}", exc_info=True)
        finally:
            self._stream_task = None
            # Invocations received before the turn ended are still applied.
            await self.tool_queue.join()
            if self.status != ChatStatus.ERROR:
                self.status = ChatStatus.READY
            self._track_anon_work()
        return assistant

    def cancel(self) -> bool:
        """Stops consuming the active stream. Returns False if no turn is open."""
        if self._stream_task is None or self._stream_task.done():
            return False
        self._cancel_requested = True
        self._stream_task.cancel()
        return True

    async def apply_tool_call(
        self, tool_name: str, args: dict[str, Any], tool_call_id: str | None = None
    ) -> ToolInvocation:
        """Applies a tool call issued outside a chat stream through the same queue."""
        invocation = ToolInvocation(
            tool_call_id=tool_call_id or new_id("call"), tool_name=tool_name, args=dict(args)
        )
        return await self.tool_queue.apply(invocation)

    async def close(self) -> None:
        self.cancel()
        await self.tool_queue.close()

    async def _consume_stream(self, request: GenerationRequest, assistant: ChatMessage) -> None:
        stream = self.transport.stream(request)
        try:
            async for event in stream:
                if self.status == ChatStatus.SUBMITTING:
                    self.status = ChatStatus.STREAMING
                    self._messages.append(assistant)
                self._handle_event(assistant, event)
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

    def _handle_event(self, assistant: ChatMessage, event: StreamEvent) -> None:
        match event:
            case TextDeltaEvent():
                assistant.append_text(event.delta)
            case ReasoningDeltaEvent():
                assistant.append_text(event.delta, kind="reasoning")
            case StepStartEvent():
                assistant.parts.append(StepStartPart())
            case ToolCallEvent():
                invocation = ToolInvocation(
                    tool_call_id=event.tool_call_id, tool_name=event.tool_name, args=dict(event.args)
                )
                assistant.parts.append(ToolInvocationPart(tool_invocation=invocation))
                self.tool_queue.enqueue(invocation)
                logger.debug(describe(invocation))
            case FinishEvent():
                logger.debug(f"Stream finished: {event.finish_reason}")
            case ErrorEvent():
                raise GenerationError(event.error)
            case _:
                logger.warning(f"Ignoring unknown stream event: {event!r}")

    def _on_tool_applied(self, invocation: ToolInvocation) -> None:
        logger.info(describe(invocation))
        self._track_anon_work()

    def _track_anon_work(self) -> None:
        if self.anon_work_store is None or self.project_id is not None:
            return
        if self._messages:
            self.anon_work_store.set(self._messages, self.file_system.serialize())
