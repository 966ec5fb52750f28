"""Projects, authentication results and the collaborators that provide them."""

from datetime import datetime
from typing import Any, Protocol

from pydantic import Field

from uigen_mcp.models.tool_invocation import WireModel


class Project(WireModel):
    id: str
    name: str = ""
    messages: list[dict[str, Any]] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthResult(WireModel):
    """Outcome of a sign-in or sign-up call. A failure is data, not an exception."""

    success: bool
    error: str | None = None
    identity: str | None = None


class Authenticator(Protocol):
    async def sign_in(self, email: str, password: str) -> AuthResult: ...

    async def sign_up(self, email: str, password: str) -> AuthResult: ...


class ProjectStore(Protocol):
    async def get_projects(self, identity: str | None) -> list[Project]:
        """Returns the identity's projects, most recently updated first."""
        ...

    async def create_project(
        self, name: str, messages: list[dict[str, Any]], data: dict[str, Any]
    ) -> Project: ...


class Router(Protocol):
    def navigate(self, path: str) -> None: ...
