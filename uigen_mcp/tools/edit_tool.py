# Copyright (c) 2023 Anthropic
# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates.
# SPDX-License-Identifier: MIT
#
# This file has been modified by ByteDance Ltd. and/or its affiliates. on 13 June 2025
#
# Original file was released under MIT License, with the full license text
# available at https://github.com/anthropics/anthropic-quickstarts/blob/main/LICENSE
#
# This modified file is released under the same license.

import logging
from typing import override

from uigen_mcp.models.tool_invocation import EDITOR_TOOL_NAME
from uigen_mcp.tools.base import (
    AmbiguousMatchError,
    InvalidLineError,
    NotFoundError,
    ToolCallArguments,
    ToolError,
    ToolExecResult,
    ToolParameter,
    UnsupportedCommandError,
)
from uigen_mcp.tools.base_file_editor import BaseFileEditorTool
from uigen_mcp.tools.utils.constants import DIRECTORY_VIEW_DEPTH
from uigen_mcp.tools.utils.formatting_utils import format_directory_listing, make_numbered_output
from uigen_mcp.tools.utils.search_utils import find_occurrences
from uigen_mcp.vfs.file_system import VirtualFileSystem

# Настройка логирования
logger = logging.getLogger(__name__)

EditToolSubCommands = [
    "view",
    "create",
    "str_replace",
    "insert",
]


class TextEditorTool(BaseFileEditorTool):
    """Tool to view, create and edit files of the virtual project."""

    @override
    def get_name(self) -> str:
        return EDITOR_TOOL_NAME

    @override
    def get_description(self) -> str:
        return """Custom editing tool for viewing, creating and editing files of the project
* State is persistent across command calls and discussions with the user
* All paths are absolute and start at the project root '/', e.g. '/App.jsx' or '/components/Button.jsx'
* If `path` is a file, `view` displays the result of applying `cat -n`. If `path` is a directory, `view` lists files and directories up to 2 levels deep
* The `create` command overwrites the file if it already exists
* If a `command` generates a long output, it will be truncated and marked with `<response clipped>`

Notes for using the `str_replace` command:
* The `old_str` parameter should match EXACTLY one or more consecutive lines from the original file. Be mindful of whitespaces!
* If the `old_str` parameter is not unique in the file, the replacement will not be performed. Make sure to include enough context in `old_str` to make it unique
* The `new_str` parameter should contain the edited lines that should replace the `old_str`
"""

    @override
    def get_parameters(self) -> list[ToolParameter]:
        """Get the parameters for the str_replace_editor."""
        return [
            ToolParameter(
                name="command",
                type="string",
                description=f"The commands to run. Allowed options are: {', '.join(EditToolSubCommands)}.",
                required=True,
                enum=EditToolSubCommands,
            ),
            ToolParameter(
                name="file_text",
                type="string",
                description="Required parameter of `create` command, with the content of the file to be created.",
            ),
            ToolParameter(
                name="insert_line",
                type="integer",
                description="Required parameter of `insert` command. The `new_str` will be inserted AFTER the line `insert_line` of `path`. Use 0 to insert at the top of the file.",
            ),
            ToolParameter(
                name="new_str",
                type="string",
                description="Optional parameter of `str_replace` command containing the new string (if not given, no string will be added). Required parameter of `insert` command containing the string to insert.",
            ),
            ToolParameter(
                name="old_str",
                type="string",
                description="Required parameter of `str_replace` command containing the string in `path` to replace.",
            ),
            ToolParameter(
                name="path",
                type="string",
                description="Absolute path to file or directory, e.g. '/App.jsx'.",
                required=True,
            ),
            ToolParameter(
                name="view_range",
                type="array",
                description="Optional parameter of `view` command when `path` points to a file. If none is given, the full file is shown. If provided, the file will be shown in the indicated line number range, e.g. [11, 12] will show lines 11 and 12. Indexing at 1 to start. Setting `[start_line, -1]` shows all lines from `start_line` to the end of the file.",
                items={"type": "integer"},
            ),
        ]

    @override
    async def _execute_operation(
        self, arguments: ToolCallArguments, file_system: VirtualFileSystem
    ) -> ToolExecResult:
        """Execute the text editor operation."""
        command = str(arguments.get("command"))
        path = self._resolve_path(arguments)
        logger.debug(f"Executing command '{command}' for path '{path}'")

        match command:
            case "view":
                return self._view(file_system, path, arguments.get("view_range"))
            case "create":
                return self._create(file_system, path, arguments.get("file_text", ""))
            case "str_replace":
                return self.str_replace(
                    file_system, path, arguments.get("old_str"), arguments.get("new_str")
                )
            case "insert":
                return self._insert(
                    file_system, path, arguments.get("insert_line"), arguments.get("new_str")
                )
            case _:
                logger.error(f"Unrecognized command: {command}")
                raise UnsupportedCommandError(
                    f"Unrecognized command {command}. The allowed commands for the {self.get_name()} tool are: {', '.join(EditToolSubCommands)}"
                )

    def _view(
        self, file_system: VirtualFileSystem, path: str, view_range: list[int] | tuple[int, int] | None
    ) -> ToolExecResult:
        """Implement the view command"""
        if file_system.is_directory(path) and not file_system.is_file(path):
            if view_range:
                raise ToolError(
                    "The `view_range` parameter is not allowed when `path` points to a directory."
                )
            entries = file_system.list_directory(path, depth=DIRECTORY_VIEW_DEPTH)
            return ToolExecResult(output=format_directory_listing(path, entries, DIRECTORY_VIEW_DEPTH))

        file_content = self.read_file(file_system, path)
        init_line = 1
        if view_range:
            if len(view_range) != 2 or not all(isinstance(i, int) for i in view_range):
                raise ToolError("Invalid `view_range`. It should be a list of two integers.")
            file_lines = file_content.split("\n")
            n_lines_file = len(file_lines)
            init_line, final_line = view_range
            if init_line < 1 or init_line > n_lines_file:
                raise InvalidLineError(
                    f"Invalid `view_range`: {list(view_range)}. Its first element `{init_line}` should be within the range of lines of the file: {[1, n_lines_file]}"
                )
            if final_line > n_lines_file:
                raise InvalidLineError(
                    f"Invalid `view_range`: {list(view_range)}. Its second element `{final_line}` should be smaller than the number of lines in the file: `{n_lines_file}`"
                )
            if final_line != -1 and final_line < init_line:
                raise InvalidLineError(
                    f"Invalid `view_range`: {list(view_range)}. Its second element `{final_line}` should be larger or equal than its first `{init_line}`"
                )

            if final_line == -1:
                file_content = "\n".join(file_lines[init_line - 1 :])
            else:
                file_content = "\n".join(file_lines[init_line - 1 : final_line])

        return ToolExecResult(
            output=make_numbered_output(file_content, path, init_line, self.max_response_len)
        )

    def _create(self, file_system: VirtualFileSystem, path: str, file_text: str | None) -> ToolExecResult:
        """Implement the create command. An existing file is overwritten."""
        if not isinstance(file_text, str):
            raise ToolError("Parameter `file_text` must be a string for command: create")

        existed = file_system.is_file(path)
        self.write_file(file_system, path, file_text)
        logger.debug(f"File {'overwritten' if existed else 'created'} at {path}")

        verb = "overwritten" if existed else "created"
        return ToolExecResult(output=f"File {verb} successfully at: {path}")

    def str_replace(
        self, file_system: VirtualFileSystem, path: str, old_str: str | None, new_str: str | None
    ) -> ToolExecResult:
        """Implement the str_replace command, which replaces old_str with new_str in the file content"""
        if not isinstance(old_str, str) or old_str == "":
            raise ToolError("Parameter `old_str` is required and must be a non-empty string for command: str_replace")
        if not (new_str is None or isinstance(new_str, str)):
            raise ToolError("Parameter `new_str` should be a string or null for command: str_replace")
        new_str = new_str or ""

        file_content = self.read_file(file_system, path)

        offsets = find_occurrences(file_content, old_str)
        logger.debug(f"Found {len(offsets)} occurrences of old_str in {path}")
        if not offsets:
            raise NotFoundError(
                f"No replacement was performed, old_str `{old_str}` did not appear verbatim in {path}."
            )
        if len(offsets) > 1:
            lines = sorted({file_content.count("\n", 0, offset) + 1 for offset in offsets})
            raise AmbiguousMatchError(
                f"No replacement was performed. Multiple occurrences of old_str `{old_str}` in lines {lines} in {path}. Please ensure it is unique"
            )

        new_file_content = file_content.replace(old_str, new_str, 1)
        self.write_file(file_system, path, new_file_content)

        # Create a snippet of the edited section
        replacement_line = file_content.split(old_str)[0].count("\n")
        start_line = max(0, replacement_line - self.snippet_lines)
        end_line = replacement_line + self.snippet_lines + new_str.count("\n")
        snippet = "\n".join(new_file_content.split("\n")[start_line : end_line + 1])

        success_msg = f"The file {path} has been edited. "
        success_msg += make_numbered_output(
            snippet, f"a snippet of {path}", start_line + 1, self.max_response_len
        )
        success_msg += "Review the changes and make sure they are as expected. Edit the file again if necessary."
        return ToolExecResult(output=success_msg)

    def _insert(
        self, file_system: VirtualFileSystem, path: str, insert_line: int | None, new_str: str | None
    ) -> ToolExecResult:
        """Implement the insert command, which inserts new_str after the specified line in the file content."""
        if isinstance(insert_line, bool) or not isinstance(insert_line, int):
            raise ToolError(f"Parameter `insert_line` must be an integer, got: {insert_line!r}")
        if not isinstance(new_str, str):
            raise ToolError("Parameter `new_str` is required for command: insert")

        file_text = self.read_file(file_system, path)
        file_text_lines = file_text.split("\n")
        n_lines_file = len(file_text_lines)
        logger.debug(f"File has {n_lines_file} lines")

        if insert_line < 0 or insert_line > n_lines_file:
            raise InvalidLineError(
                f"Invalid `insert_line` parameter: {insert_line}. It should be within the range of lines of the file: {[0, n_lines_file]}"
            )

        new_str_lines = new_str.split("\n")
        new_file_text_lines = (
            file_text_lines[:insert_line] + new_str_lines + file_text_lines[insert_line:]
        )
        snippet_lines = (
            file_text_lines[max(0, insert_line - self.snippet_lines) : insert_line]
            + new_str_lines
            + file_text_lines[insert_line : insert_line + self.snippet_lines]
        )

        self.write_file(file_system, path, "\n".join(new_file_text_lines))

        success_msg = f"The file {path} has been edited. "
        success_msg += make_numbered_output(
            "\n".join(snippet_lines),
            "a snippet of the edited file",
            max(1, insert_line - self.snippet_lines + 1),
            self.max_response_len,
        )
        success_msg += "Review the changes and make sure they are as expected (correct indentation, no duplicate lines, etc). Edit the file again if necessary."
        return ToolExecResult(output=success_msg)
