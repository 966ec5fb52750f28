"""Ordered queue of pending tool invocations, drained by a single consumer."""

import asyncio
import logging
from collections.abc import Callable

from uigen_mcp.interpreter import ToolCommandInterpreter
from uigen_mcp.models.tool_invocation import ToolInvocation

logger = logging.getLogger(__name__)


class ToolCallQueue:
    """
    Applies tool invocations to the interpreter one at a time, in the order
    they were enqueued.

    The consumer task is started lazily on the running event loop and lives
    until `close()`. Nothing else calls the interpreter, so two invocations
    can never interleave on the same file system.
    """

    def __init__(
        self,
        interpreter: ToolCommandInterpreter,
        on_applied: Callable[[ToolInvocation], None] | None = None,
    ) -> None:
        self.interpreter = interpreter
        self._on_applied = on_applied
        self._queue: asyncio.Queue[tuple[ToolInvocation, asyncio.Future]] | None = None
        self._consumer: asyncio.Task | None = None

    def enqueue(self, invocation: ToolInvocation) -> asyncio.Future:
        """Adds an invocation to the queue; the returned future resolves once it is applied."""
        self._ensure_consumer()
        future = asyncio.get_running_loop().create_future()
        self._queue.put_nowait((invocation, future))
        logger.debug(f"Queued tool call {invocation.tool_call_id} ({self._queue.qsize()} pending)")
        return future

    async def apply(self, invocation: ToolInvocation) -> ToolInvocation:
        """Enqueues an invocation and waits for its result."""
        return await self.enqueue(invocation)

    async def join(self) -> None:
        """Waits until every queued invocation has been applied."""
        if self._queue is not None:
            await self._queue.join()

    @property
    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    async def close(self) -> None:
        """Applies the remaining backlog, then stops the consumer."""
        if self._consumer is None:
            return
        await self.join()
        self._consumer.cancel()
        try:
            await self._consumer
        except asyncio.CancelledError:
            pass
        self._consumer = None
        self._queue = None

    def _ensure_consumer(self) -> None:
        if self._queue is None:
            self._queue = asyncio.Queue()
        if self._consumer is None or self._consumer.done():
            self._consumer = asyncio.get_running_loop().create_task(self._consume())

    async def _consume(self) -> None:
        queue = self._queue
        while True:
            invocation, future = await queue.get()
            try:
                await self.interpreter.apply(invocation)
                if self._on_applied is not None:
                    self._on_applied(invocation)
                if not future.done():
                    future.set_result(invocation)
            except Exception as e:
                logger.error(f"Failed to apply tool call {invocation.tool_call_id}: {e}", exc_info=True)
                if not future.done():
                    future.set_exception(e)
            finally:
                queue.task_done()
