"""Single-slot store for work done before the visitor authenticated."""

import copy
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from threading import Lock
from typing import Any

from pydantic import BaseModel

from uigen_mcp.models.session import AnonWorkBuffer

logger = logging.getLogger(__name__)


class AnonWorkStore:
    """
    Holds at most one AnonWorkBuffer for a session.

    Writes are timestamped and the last write wins. Writers in different
    tabs or processes are not coordinated.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._buffer: AnonWorkBuffer | None = None

    def set(self, messages: Sequence[BaseModel | Mapping[str, Any]], snapshot: Mapping[str, Any]) -> None:
        """Replaces the buffer. A write without messages is ignored."""
        if not messages:
            logger.debug("Ignoring anonymous work update without messages")
            return

        buffer = AnonWorkBuffer(
            messages=[self._to_plain(message) for message in messages],
            file_system_data=copy.deepcopy(dict(snapshot)),
            updated_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._buffer = buffer
        logger.debug(
            f"Stored anonymous work: {len(buffer.messages)} message(s), "
            f"{len(buffer.file_system_data)} file(s)"
        )

    def get(self) -> AnonWorkBuffer | None:
        with self._lock:
            buffer = self._buffer
        return buffer.model_copy(deep=True) if buffer is not None else None

    def clear(self) -> None:
        with self._lock:
            self._buffer = None
        logger.debug("Cleared anonymous work")

    def has_work(self) -> bool:
        buffer = self._buffer
        return buffer is not None and buffer.has_messages

    @staticmethod
    def _to_plain(message: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
        if isinstance(message, BaseModel):
            return message.model_dump(by_alias=True, mode="json")
        return copy.deepcopy(dict(message))
