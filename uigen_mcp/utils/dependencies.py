"""
Configuration and dependency management for the UIGen MCP server.
"""

import logging
from functools import lru_cache

from uigen_mcp.tools.edit_tool import TextEditorTool
from uigen_mcp.tools.file_manager_tool import FileManagerTool
from uigen_mcp.utils.config import ServiceConfig
from uigen_mcp.utils.session_manager import SessionManager

logger = logging.getLogger(__name__)


@lru_cache
def get_base_config() -> ServiceConfig:
    """
    Retrieves the base server configuration from environment variables.

    This function is cached to avoid repeatedly reading and parsing environment
    variables and .env files.

    Returns:
        A cached instance of the ServiceConfig.
    """
    return ServiceConfig()


# --- Tool Providers ---


@lru_cache
def get_file_editor_tool_provider() -> TextEditorTool:
    """Returns a cached instance of the TextEditorTool."""
    logger.info("Initializing TextEditorTool singleton.")
    config = get_base_config()
    return TextEditorTool(
        snippet_lines=config.SNIPPET_LINES,
        max_response_len=config.MAX_RESPONSE_LEN or None,
    )


@lru_cache
def get_file_manager_tool_provider() -> FileManagerTool:
    """Returns a cached instance of the FileManagerTool."""
    logger.info("Initializing FileManagerTool singleton.")
    return FileManagerTool()


@lru_cache
def get_session_manager() -> SessionManager:
    """Returns the process-wide SessionManager, sharing the tool singletons."""
    logger.info("Initializing SessionManager singleton.")
    return SessionManager(
        editor_tool=get_file_editor_tool_provider(),
        file_manager_tool=get_file_manager_tool_provider(),
    )
