from datetime import datetime, timezone
from typing import Any

from pydantic import Field

from uigen_mcp.models.tool_invocation import WireModel


class AnonWorkBuffer(WireModel):
    """Pending transcript and snapshot of a session that has no project yet."""

    messages: list[dict[str, Any]] = Field(default_factory=list)
    file_system_data: dict[str, Any] = Field(default_factory=dict)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def has_messages(self) -> bool:
        return len(self.messages) > 0
