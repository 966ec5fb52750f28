"""Chat transcript, stream events and the outbound generation request."""

import uuid
from typing import Annotated, Any, Literal, Union

from pydantic import Field

from uigen_mcp.models.tool_invocation import ToolInvocation, WireModel


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


# --- Message parts ---


class TextPart(WireModel):
    type: Literal["text"] = "text"
    text: str = ""


class ReasoningPart(WireModel):
    type: Literal["reasoning"] = "reasoning"
    text: str = ""


class ToolInvocationPart(WireModel):
    type: Literal["tool-invocation"] = "tool-invocation"
    tool_invocation: ToolInvocation


class StepStartPart(WireModel):
    type: Literal["step-start"] = "step-start"


MessagePart = Annotated[
    Union[TextPart, ReasoningPart, ToolInvocationPart, StepStartPart],
    Field(discriminator="type"),
]


class ChatMessage(WireModel):
    id: str = Field(default_factory=lambda: new_id("msg"))
    role: Literal["user", "assistant"]
    parts: list[MessagePart] = Field(default_factory=list)

    @classmethod
    def user(cls, text: str) -> "ChatMessage":
        return cls(role="user", parts=[TextPart(text=text)])

    @property
    def text(self) -> str:
        return "".join(part.text for part in self.parts if isinstance(part, TextPart))

    @property
    def tool_invocations(self) -> list[ToolInvocation]:
        return [part.tool_invocation for part in self.parts if isinstance(part, ToolInvocationPart)]

    def append_text(self, delta: str, kind: Literal["text", "reasoning"] = "text") -> None:
        """Extends the trailing part of the same kind, or starts a new one."""
        part_cls = TextPart if kind == "text" else ReasoningPart
        if self.parts and type(self.parts[-1]) is part_cls:
            self.parts[-1].text += delta
        else:
            self.parts.append(part_cls(text=delta))


# --- Stream events ---


class TextDeltaEvent(WireModel):
    type: Literal["text-delta"] = "text-delta"
    delta: str


class ReasoningDeltaEvent(WireModel):
    type: Literal["reasoning-delta"] = "reasoning-delta"
    delta: str


class StepStartEvent(WireModel):
    type: Literal["step-start"] = "step-start"


class ToolCallEvent(WireModel):
    type: Literal["tool-call"] = "tool-call"
    tool_call_id: str = Field(default_factory=lambda: new_id("call"))
    tool_name: str
    args: dict[str, Any] = Field(default_factory=dict)


class FinishEvent(WireModel):
    type: Literal["finish"] = "finish"
    finish_reason: str | None = None


class ErrorEvent(WireModel):
    type: Literal["error"] = "error"
    error: str


StreamEvent = Annotated[
    Union[
        TextDeltaEvent,
        ReasoningDeltaEvent,
        StepStartEvent,
        ToolCallEvent,
        FinishEvent,
        ErrorEvent,
    ],
    Field(discriminator="type"),
]


class GenerationRequest(WireModel):
    """Body sent to the generation endpoint."""

    messages: list[ChatMessage]
    files: dict[str, dict[str, str]]
    project_id: str | None = None
