"""
Entry point of the UIGen MCP server.

Loads .env, configures logging, optionally seeds the default session with a
saved project, and runs the server on the configured transport.
"""

import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from uigen_mcp.tools.base import ToolError
from uigen_mcp.utils.config import ServiceConfig

logger = logging.getLogger(__name__)


def configure_logging(config: ServiceConfig) -> None:
    # stdout carries the MCP protocol when running over stdio.
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def seed_default_session(project_file: Path) -> int:
    """
    Loads a serialized project into the "default" session.

    Returns:
        The number of files loaded.
    """
    from uigen_mcp.utils.dependencies import get_session_manager

    snapshot = json.loads(project_file.read_text(encoding="utf-8"))
    file_system = get_session_manager().get_session("default").file_system
    file_system.deserialize(snapshot)
    logger.info(f"Loaded {len(file_system)} file(s) from {project_file} into the default session")
    return len(file_system)


def run_server() -> None:
    load_dotenv()

    # The cached config must be built only after .env is loaded.
    from uigen_mcp.server import mcp_app, server_config

    configure_logging(server_config)
    logger.info("--- UIGen MCP Server ---")

    if server_config.PROJECT_FILE is not None:
        try:
            seed_default_session(server_config.PROJECT_FILE)
        except (OSError, ValueError, ToolError) as e:
            logger.critical(f"Cannot load project file {server_config.PROJECT_FILE}: {e}")
            sys.exit(1)

    logger.info(f"Starting server with transport: {server_config.MCP_TRANSPORT}")
    if server_config.MCP_TRANSPORT != "stdio":
        logger.info(f"Server will listen on: {server_config.MCP_HOST}:{server_config.MCP_PORT}")

    mcp_app.run(transport=server_config.MCP_TRANSPORT)


if __name__ == "__main__":
    run_server()
