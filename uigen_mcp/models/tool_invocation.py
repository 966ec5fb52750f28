"""Tool invocation records and the validated argument variants of each tool."""

from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

EDITOR_TOOL_NAME = "str_replace_editor"
FILE_MANAGER_TOOL_NAME = "file_manager"


class ToolArgs(BaseModel):
    """Common base of every argument variant."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=False)

    path: str


# --- str_replace_editor ---


class CreateArgs(ToolArgs):
    command: Literal["create"]
    file_text: str = Field(default="", validation_alias=AliasChoices("file_text", "content"))


class ViewArgs(ToolArgs):
    command: Literal["view"]
    view_range: tuple[int, int] | None = None


class StrReplaceArgs(ToolArgs):
    command: Literal["str_replace"]
    old_str: str
    new_str: str = ""


class InsertArgs(ToolArgs):
    command: Literal["insert"]
    insert_line: int
    new_str: str


EditorArgs = Annotated[
    Union[CreateArgs, ViewArgs, StrReplaceArgs, InsertArgs],
    Field(discriminator="command"),
]


# --- file_manager ---


class RenameArgs(ToolArgs):
    command: Literal["rename"]
    new_path: str


class DeleteArgs(ToolArgs):
    command: Literal["delete"]


FileManagerArgs = Annotated[
    Union[RenameArgs, DeleteArgs],
    Field(discriminator="command"),
]

TOOL_ARGS_ADAPTERS: dict[str, TypeAdapter] = {
    EDITOR_TOOL_NAME: TypeAdapter(EditorArgs),
    FILE_MANAGER_TOOL_NAME: TypeAdapter(FileManagerArgs),
}


class WireModel(BaseModel):
    """Base for models exchanged with the client: camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ToolErrorInfo(WireModel):
    type: str
    message: str


class ToolResult(WireModel):
    """Payload stored in a completed tool invocation."""

    success: bool
    output: str | None = None
    error: ToolErrorInfo | None = None

    @classmethod
    def ok(cls, output: str | None) -> "ToolResult":
        return cls(success=True, output=output)

    @classmethod
    def failed(cls, error_type: str, message: str) -> "ToolResult":
        return cls(success=False, error=ToolErrorInfo(type=error_type, message=message))


class ToolInvocation(WireModel):
    """One structured command issued by the agent."""

    tool_call_id: str
    tool_name: str
    args: dict[str, Any] = Field(default_factory=dict)
    state: Literal["pending", "result"] = "pending"
    result: ToolResult | None = None

    @property
    def command(self) -> str | None:
        command = self.args.get("command")
        return command if isinstance(command, str) else None

    @property
    def is_complete(self) -> bool:
        return self.state == "result"

    def complete(self, result: ToolResult) -> None:
        """Moves the invocation from pending to result. Happens exactly once."""
        if self.state == "result":
            raise ValueError(f"Tool invocation {self.tool_call_id} already has a result.")
        self.result = result
        self.state = "result"
