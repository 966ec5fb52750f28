"""Service configuration definition."""

from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings

from uigen_mcp.tools.utils.constants import MAX_RESPONSE_LEN, SNIPPET_LINES


class ServiceConfig(BaseSettings):
    """
    Settings of the UIGen MCP server, read from the process environment.

    A .env file is honoured because main.py loads it before the first
    ServiceConfig is built.
    """

    MCP_TRANSPORT: Literal["stdio", "sse", "streamable-http"] = "stdio"
    MCP_HOST: str = "0.0.0.0"
    MCP_PORT: int = 8660
    # Origins allowed by the CORS middleware of the HTTP transports.
    CORS_ORIGIN_REGEX: str = ".*"
    LOG_LEVEL: str = "INFO"

    # Tool outputs longer than this are clipped. 0 disables clipping.
    MAX_RESPONSE_LEN: int = MAX_RESPONSE_LEN
    # Lines of context shown around an edit.
    SNIPPET_LINES: int = SNIPPET_LINES

    # Serialized project loaded into the "default" session at startup.
    PROJECT_FILE: Path | None = None

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("MAX_RESPONSE_LEN", "SNIPPET_LINES")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must not be negative")
        return value

    class Config:
        extra = "ignore"
