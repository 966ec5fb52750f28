import logging
from typing import override

from uigen_mcp.models.tool_invocation import FILE_MANAGER_TOOL_NAME
from uigen_mcp.tools.base import ToolCallArguments, ToolExecResult, ToolParameter, UnsupportedCommandError
from uigen_mcp.tools.base_file_editor import BaseFileEditorTool
from uigen_mcp.vfs.file_system import VirtualFileSystem

logger = logging.getLogger(__name__)

FileManagerSubCommands = ["rename", "delete"]


class FileManagerTool(BaseFileEditorTool):
    """
    Tool for moving and removing files of the virtual project.
    Both commands accept a file or a directory; a directory applies to every
    file below it.
    For reading and writing file contents, use str_replace_editor.
    """

    @override
    def get_name(self) -> str:
        return FILE_MANAGER_TOOL_NAME

    @override
    def get_description(self) -> str:
        return """A tool for managing files of the project.
Use `rename` to move a file or a directory to `new_path`. Parent directories are created implicitly. Fails if `new_path` already exists.
Use `delete` to remove a file or a directory with everything inside it."""

    @override
    def get_parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="command",
                type="string",
                description=f"The command to run. Allowed options are: {', '.join(FileManagerSubCommands)}.",
                required=True,
                enum=FileManagerSubCommands,
            ),
            ToolParameter(
                name="path",
                type="string",
                description="Absolute path of the file or directory to operate on.",
                required=True,
            ),
            ToolParameter(
                name="new_path",
                type="string",
                description="Required parameter of `rename`: the absolute destination path.",
                required=False,
            ),
        ]

    @override
    async def _execute_operation(
        self, arguments: ToolCallArguments, file_system: VirtualFileSystem
    ) -> ToolExecResult:
        command = arguments.get("command")
        path = self._resolve_path(arguments)

        match command:
            case "rename":
                return self._rename_handler(file_system, path, arguments)
            case "delete":
                return self._delete_handler(file_system, path)
            case _:
                raise UnsupportedCommandError(
                    f"Unknown command: {command}. Allowed options are: {', '.join(FileManagerSubCommands)}."
                )

    def _rename_handler(
        self, file_system: VirtualFileSystem, path: str, args: ToolCallArguments
    ) -> ToolExecResult:
        new_path = self._resolve_path(args, "new_path")
        file_system.rename(path, new_path)
        logger.debug(f"Renamed {path} to {new_path}")
        return ToolExecResult(output=f"Successfully renamed {path} to {new_path}")

    def _delete_handler(self, file_system: VirtualFileSystem, path: str) -> ToolExecResult:
        file_system.remove(path)
        logger.debug(f"Deleted {path}")
        return ToolExecResult(output=f"Successfully deleted {path}")
