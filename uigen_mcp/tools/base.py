# Copyright (c) 2025 ByteDance Ltd. and/or its affiliates
# SPDX-License-Identifier: MIT

"""Base classes and error taxonomy shared by all tools."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

ToolCallArguments = dict[str, Any]


class ToolError(Exception):
    """Base class for errors raised while executing a tool.

    Every subclass carries an ``error_type`` name which is what ends up in a
    tool invocation's result payload.
    """

    error_type: str = "ToolError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidPathError(ToolError):
    error_type = "InvalidPath"


class NotFoundError(ToolError):
    error_type = "NotFound"


class ConflictError(ToolError):
    error_type = "Conflict"


class AmbiguousMatchError(ToolError):
    error_type = "AmbiguousMatch"


class InvalidLineError(ToolError):
    error_type = "InvalidLine"


class UnsupportedCommandError(ToolError):
    error_type = "UnsupportedCommand"


@dataclass
class ToolExecResult:
    """Result of a single tool execution."""

    output: str | None = None
    error: str | None = None
    error_code: int = 0
    error_type: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def from_error(cls, error: ToolError) -> "ToolExecResult":
        return cls(error=error.message, error_code=-1, error_type=error.error_type)


@dataclass
class ToolParameter:
    """Describes one parameter of a tool for the agent."""

    name: str
    type: str | list[str]
    description: str
    enum: list[str] | None = None
    items: dict[str, object] | None = None
    required: bool = False


class Tool(ABC):
    """Base class for all tools."""

    def __init__(self, model_provider: str | None = None) -> None:
        self._model_provider = model_provider

    @abstractmethod
    def get_model_provider(self) -> str | None:
        pass

    @abstractmethod
    def get_name(self) -> str:
        pass

    @abstractmethod
    def get_description(self) -> str:
        pass

    @abstractmethod
    def get_parameters(self) -> list[ToolParameter]:
        pass

    @abstractmethod
    async def execute(self, arguments: ToolCallArguments) -> ToolExecResult:
        pass

    def get_input_schema(self) -> dict[str, Any]:
        """JSON schema of the tool's input, as sent to the generation endpoint."""
        properties: dict[str, Any] = {}
        required: list[str] = []
        for param in self.get_parameters():
            schema: dict[str, Any] = {
                "type": param.type,
                "description": param.description,
            }
            if param.enum:
                schema["enum"] = param.enum
            if param.items:
                schema["items"] = param.items
            properties[param.name] = schema
            if param.required:
                required.append(param.name)
        return {"type": "object", "properties": properties, "required": required}

    def json_definition(self) -> dict[str, Any]:
        return {
            "name": self.get_name(),
            "description": self.get_description(),
            "parameters": self.get_input_schema(),
        }
