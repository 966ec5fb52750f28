# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Base class for file editing tools with common functionality."""

import logging
from abc import ABC, abstractmethod
from typing import override

from uigen_mcp.tools.base import Tool, ToolCallArguments, ToolError, ToolExecResult
from uigen_mcp.tools.utils.constants import MAX_RESPONSE_LEN, SNIPPET_LINES
from uigen_mcp.utils.path_utils import normalize_path
from uigen_mcp.vfs.file_system import VirtualFileSystem

logger = logging.getLogger(__name__)

FILE_SYSTEM_ARG = "_file_system"


class BaseFileEditorTool(Tool, ABC):
    """Base class for tools that operate on a session's virtual file system."""

    def __init__(
        self,
        model_provider: str | None = None,
        snippet_lines: int = SNIPPET_LINES,
        max_response_len: int | None = MAX_RESPONSE_LEN,
    ) -> None:
        super().__init__(model_provider)
        self.snippet_lines = snippet_lines
        self.max_response_len = max_response_len

    @override
    def get_model_provider(self) -> str | None:
        return self._model_provider

    def _validate_file_system(self, arguments: ToolCallArguments) -> VirtualFileSystem:
        """
        Validate and extract the VirtualFileSystem from arguments.

        Args:
            arguments: The tool call arguments

        Returns:
            The session's VirtualFileSystem

        Raises:
            ToolError: If no file system was injected
        """
        file_system = arguments.get(FILE_SYSTEM_ARG)
        if not isinstance(file_system, VirtualFileSystem):
            logger.error("VirtualFileSystem not found in arguments")
            raise ToolError("VirtualFileSystem not found in arguments.")
        return file_system

    def _resolve_path(self, arguments: ToolCallArguments, key: str = "path") -> str:
        """Normalize a path argument; raises InvalidPathError."""
        path = normalize_path(arguments.get(key))
        logger.debug(f"Resolved {key}: {path}")
        return path

    def read_file(self, file_system: VirtualFileSystem, path: str) -> str:
        """Read a file, raising NotFoundError if it is absent."""
        logger.debug(f"Reading file: {path}")
        content = file_system.read(path)
        logger.debug(f"Successfully read file {path}, content length: {len(content)}")
        return content

    def write_file(self, file_system: VirtualFileSystem, path: str, content: str) -> None:
        """Create or replace a file."""
        logger.debug(f"Writing file: {path}, content length: {len(content)}")
        file_system.write(path, content)
        logger.debug(f"Successfully wrote file {path}")

    @abstractmethod
    async def _execute_operation(
        self, arguments: ToolCallArguments, file_system: VirtualFileSystem
    ) -> ToolExecResult:
        """
        Execute the specific operation for this tool.

        Args:
            arguments: The tool call arguments
            file_system: The session's virtual file system

        Returns:
            The result of the operation
        """
        pass

    @override
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        """
        Execute the tool with common validation and error handling.

        Tool errors never escape: they are returned inside the result so the
        agent can read them and correct itself.
        """
        try:
            file_system = self._validate_file_system(arguments)
            return await self._execute_operation(arguments, file_system)

        except ToolError as e:
            logger.info(f"Tool error in {self.get_name()}: [{e.error_type}] {e}")
            return ToolExecResult.from_error(e)
        except Exception as e:
            logger.error(f"Unexpected error in {self.get_name()}: {e}", exc_info=True)
            return ToolExecResult(
                error=f"Unexpected error: {str(e)}", error_code=-1, error_type="InternalError"
            )
