"""
Translates one structured tool invocation into virtual file system operations.

Arguments are validated against the tool's command variants before anything
touches the file system. Whatever happens, the invocation ends in state
`result`; failures are carried inside the result so the agent can observe
them and react.
"""

import logging

from pydantic import ValidationError

from uigen_mcp.models.tool_invocation import (
    EDITOR_TOOL_NAME,
    FILE_MANAGER_TOOL_NAME,
    TOOL_ARGS_ADAPTERS,
    ToolArgs,
    ToolInvocation,
    ToolResult,
)
from uigen_mcp.tools.base import Tool, ToolError, UnsupportedCommandError
from uigen_mcp.tools.base_file_editor import FILE_SYSTEM_ARG, BaseFileEditorTool
from uigen_mcp.tools.edit_tool import TextEditorTool
from uigen_mcp.tools.file_manager_tool import FileManagerTool
from uigen_mcp.vfs.file_system import VirtualFileSystem

logger = logging.getLogger(__name__)


class ToolCommandInterpreter:
    """Applies tool invocations to one VirtualFileSystem."""

    def __init__(
        self,
        file_system: VirtualFileSystem,
        editor_tool: TextEditorTool | None = None,
        file_manager_tool: FileManagerTool | None = None,
    ) -> None:
        self.file_system = file_system
        self._tools: dict[str, BaseFileEditorTool] = {
            EDITOR_TOOL_NAME: editor_tool or TextEditorTool(),
            FILE_MANAGER_TOOL_NAME: file_manager_tool or FileManagerTool(),
        }

    @property
    def tools(self) -> list[Tool]:
        return list(self._tools.values())

    def validate(self, invocation: ToolInvocation) -> ToolArgs:
        """
        Validates the invocation's arguments against its (toolName, command) variant.

        Raises:
            UnsupportedCommandError: For an unknown tool, an unknown command or
                a malformed argument shape.
        """
        adapter = TOOL_ARGS_ADAPTERS.get(invocation.tool_name)
        if adapter is None:
            raise UnsupportedCommandError(
                f"Unsupported tool '{invocation.tool_name}'. Available tools: {', '.join(self._tools)}."
            )
        try:
            return adapter.validate_python(invocation.args)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc']) or 'args'}: {err['msg']}" for err in e.errors()
            )
            raise UnsupportedCommandError(
                f"Unsupported command or arguments for {invocation.tool_name} "
                f"(command={invocation.command!r}): {details}"
            ) from None

    async def apply(self, invocation: ToolInvocation) -> ToolInvocation:
        """
        Runs a pending invocation and completes it in place.

        Raises:
            ValueError: If the invocation already holds a result. Nothing is
                executed in that case.
        """
        if invocation.is_complete:
            raise ValueError(f"Tool call {invocation.tool_call_id} has already been applied.")
        logger.debug(
            f"Applying {invocation.tool_name}.{invocation.command} ({invocation.tool_call_id})"
        )
        try:
            args = self.validate(invocation)
        except ToolError as e:
            logger.info(f"Rejected tool call {invocation.tool_call_id}: {e}")
            invocation.complete(ToolResult.failed(e.error_type, e.message))
            return invocation

        tool = self._tools[invocation.tool_name]
        arguments = args.model_dump()
        arguments[FILE_SYSTEM_ARG] = self.file_system
        result = await tool.execute(arguments)

        if result.success:
            invocation.complete(ToolResult.ok(result.output))
        else:
            invocation.complete(
                ToolResult.failed(result.error_type or "ToolError", result.error or "")
            )
        return invocation
