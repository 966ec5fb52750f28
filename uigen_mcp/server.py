"""
MCP server definition for UIGen.
"""

import logging
from typing import Any, List, Optional

from fastapi.middleware.cors import CORSMiddleware
from starlette.applications import Starlette
from starlette.middleware import Middleware

from mcp.server.fastmcp import Context, FastMCP

from uigen_mcp.chat.tool_labels import describe
from uigen_mcp.models.tool_invocation import EDITOR_TOOL_NAME, FILE_MANAGER_TOOL_NAME, ToolInvocation
from uigen_mcp.prompts import GENERATION_PROMPT, get_prompt
from uigen_mcp.utils.config import ServiceConfig
from uigen_mcp.utils.dependencies import get_base_config, get_session_manager


# Get a module-level logger
logger = logging.getLogger(__name__)


class CustomFastMCP(FastMCP):
    """FastMCP server whose HTTP transports answer cross-origin requests."""

    def __init__(self, *args: Any, cors_origin_regex: str = ".*", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.cors_origin_regex = cors_origin_regex

    def _add_cors_middleware(self, app: Starlette) -> Starlette:
        app.user_middleware.insert(
            0,
            Middleware(
                CORSMiddleware,
                allow_origin_regex=self.cors_origin_regex,
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
            ),
        )
        app.middleware_stack = app.build_middleware_stack()
        return app

    def sse_app(self, mount_path: str | None = None) -> Starlette:
        """Overrides the default sse_app to inject CORS middleware."""
        app = super().sse_app(mount_path)
        return self._add_cors_middleware(app)

    def streamable_http_app(self) -> Starlette:
        """Overrides the default streamable_http_app to inject CORS middleware."""
        app = super().streamable_http_app()
        return self._add_cors_middleware(app)


def build_server(config: ServiceConfig) -> CustomFastMCP:
    """Build and configure the FastMCP server instance.

    Args:
        config: The server's service configuration.

    Returns:
        A configured CustomFastMCP instance.
    """
    logger.info(
        "Initializing FastMCP server",
        extra={"host": config.MCP_HOST, "port": config.MCP_PORT},
    )
    return CustomFastMCP(
        "uigen-mcp",
        host=config.MCP_HOST,
        port=config.MCP_PORT,
        cors_origin_regex=config.CORS_ORIGIN_REGEX,
    )


def invocation_response(invocation: ToolInvocation) -> dict[str, Any]:
    """Shapes a completed invocation into the tool's response dictionary."""
    result = invocation.result
    response: dict[str, Any] = {"summary": describe(invocation)}
    if result is None or not result.success:
        response["status"] = "error"
        response["error"] = result.error.message if result and result.error else "No result"
        response["error_type"] = result.error.type if result and result.error else "InternalError"
    else:
        response["status"] = "success"
        response["result"] = result.output
    return response


# Get the base configuration for server initialization.
# This is also imported by main.py to run the server.
server_config = get_base_config()
mcp_app = build_server(server_config)


# --- Prompt Handlers ---
@mcp_app.prompt(name=GENERATION_PROMPT, title="Component Generation Prompt")
def generation() -> str:
    """Provides the system prompt for the component-building agent."""
    return get_prompt(GENERATION_PROMPT)


# --- Tool Definitions ---


@mcp_app.tool(name=EDITOR_TOOL_NAME)
async def str_replace_editor(
    context: Context,
    command: str,
    path: str,
    file_text: Optional[str] = None,
    old_str: Optional[str] = None,
    new_str: Optional[str] = None,
    insert_line: Optional[int] = None,
    view_range: Optional[List[int]] = None,
    session_id: str = "default",
) -> dict[str, Any]:
    """
    View, create and edit files of the virtual project (view, create, str_replace, insert).

    Args:
        command: The type of operation. Can be 'view', 'create', 'str_replace', or 'insert'.
        path: The absolute path of the file or directory, e.g. '/App.jsx'.
        file_text: The content for a 'create' operation. Overwrites an existing file.
        old_str: The string to search for in a 'str_replace' operation. Must be unique.
        new_str: The replacement string for 'str_replace' or the content for 'insert'.
        insert_line: The line number for an 'insert' operation (inserts AFTER this line, 0 for the top).
        view_range: The line range to view (e.g., [10, 25]).
        session_id: The chat session owning the project.

    Returns:
        A dictionary containing the result of the operation.
    """
    logger.info(f"Executing {EDITOR_TOOL_NAME} command '{command}' on path '{path}'")
    args = {
        "command": command,
        "path": path,
        "file_text": file_text,
        "old_str": old_str,
        "new_str": new_str,
        "insert_line": insert_line,
        "view_range": view_range,
    }
    # Filter out None values so we don't pass them to the tool
    args = {k: v for k, v in args.items() if v is not None}
    try:
        session = get_session_manager().get_session(session_id)
        invocation = await session.apply_tool_call(EDITOR_TOOL_NAME, args)
        return invocation_response(invocation)
    except Exception as e:
        logger.error(f"Error executing {EDITOR_TOOL_NAME} command: {e}", exc_info=True)
        return {"status": "error", "error": str(e), "error_type": "InternalError"}


@mcp_app.tool(name=FILE_MANAGER_TOOL_NAME)
async def file_manager(
    context: Context,
    command: str,
    path: str,
    new_path: Optional[str] = None,
    session_id: str = "default",
) -> dict[str, Any]:
    """
    Rename or delete a file or a directory of the virtual project.

    Args:
        command: Either 'rename' or 'delete'.
        path: The absolute path of the file or directory.
        new_path: For 'rename', the absolute destination path. Must not exist yet.
        session_id: The chat session owning the project.

    Returns:
        A dictionary containing the result of the operation.
    """
    logger.info(f"Executing {FILE_MANAGER_TOOL_NAME} command '{command}' on path '{path}'")
    args = {"command": command, "path": path, "new_path": new_path}
    args = {k: v for k, v in args.items() if v is not None}
    try:
        session = get_session_manager().get_session(session_id)
        invocation = await session.apply_tool_call(FILE_MANAGER_TOOL_NAME, args)
        return invocation_response(invocation)
    except Exception as e:
        logger.error(f"Error executing {FILE_MANAGER_TOOL_NAME} command: {e}", exc_info=True)
        return {"status": "error", "error": str(e), "error_type": "InternalError"}


@mcp_app.tool()
async def project_snapshot(
    context: Context,
    session_id: str = "default",
) -> dict[str, Any]:
    """
    Returns the current snapshot of the virtual project.

    Args:
        session_id: The chat session owning the project.

    Returns:
        A dictionary mapping each absolute path to {"type": "file", "content": ...}.
    """
    logger.info(f"Serializing project of session '{session_id}'")
    session = get_session_manager().get_session(session_id)
    return {"status": "success", "files": session.file_system.serialize()}
