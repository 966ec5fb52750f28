"""Short human-readable status lines for tool invocations."""

from typing import NamedTuple

from uigen_mcp.models.tool_invocation import EDITOR_TOOL_NAME, FILE_MANAGER_TOOL_NAME, ToolInvocation
from uigen_mcp.utils.path_utils import base_name


class ToolLabel(NamedTuple):
    pending: str
    complete: str


def get_labels(invocation: ToolInvocation) -> ToolLabel:
    args = invocation.args or {}
    command = args.get("command")
    file_name = base_name(args.get("path"))

    if invocation.tool_name == EDITOR_TOOL_NAME:
        match command:
            case "create":
                return ToolLabel(f"Writing {file_name}...", f"Wrote {file_name}")
            case "view":
                return ToolLabel(f"Reading {file_name}...", f"Read {file_name}")
            case "str_replace" | "insert":
                return ToolLabel(f"Editing {file_name}...", f"Edited {file_name}")
            case _:
                return ToolLabel(f"Working on {file_name}...", f"Updated {file_name}")

    if invocation.tool_name == FILE_MANAGER_TOOL_NAME:
        match command:
            case "rename":
                return ToolLabel("Renaming file...", f"Renamed to {base_name(args.get('new_path'))}")
            case "delete":
                return ToolLabel("Removing file...", "Removed file")
            case _:
                return ToolLabel("Processing file...", "Done")

    return ToolLabel("Working...", "Done")


def describe(invocation: ToolInvocation) -> str:
    labels = get_labels(invocation)
    return labels.complete if invocation.is_complete else labels.pending
