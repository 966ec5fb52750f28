"""
Post-authentication routing.

After a visitor signs in or signs up, their anonymous work (if any) becomes a
new project; otherwise they are sent to their most recent project, or to a
fresh empty one.
"""

import logging
import random
from collections.abc import Awaitable, Callable
from datetime import datetime

from uigen_mcp.models.project import AuthResult, Authenticator, Project, ProjectStore, Router
from uigen_mcp.utils.anon_work_store import AnonWorkStore

logger = logging.getLogger(__name__)

NEW_DESIGN_SEQUENCE_LIMIT = 100000


class MigrationError(RuntimeError):
    """Listing or creating projects failed after authentication succeeded."""


class AuthInProgressError(RuntimeError):
    """Raised when sign-in or sign-up is called while another call is in flight."""


class SessionMigrationManager:
    """Decides where an authenticated user lands and persists pending anonymous work."""

    def __init__(
        self,
        anon_work_store: AnonWorkStore,
        project_store: ProjectStore,
        router: Router,
        clock: Callable[[], datetime] = datetime.now,
        sequence: Callable[[], int] | None = None,
    ) -> None:
        self.anon_work_store = anon_work_store
        self.project_store = project_store
        self.router = router
        self._clock = clock
        self._sequence = sequence or (lambda: random.randrange(NEW_DESIGN_SEQUENCE_LIMIT))

    async def migrate(self, identity: str | None = None) -> str:
        """
        Routes the user after authentication and returns the destination project id.

        Raises:
            MigrationError: If the project store fails. There is no fallback.
        """
        buffer = self.anon_work_store.get()
        if buffer is not None and buffer.has_messages:
            name = f"Design from {self._clock().strftime('%H:%M:%S')}"
            project = await self._create_project(
                name, messages=buffer.messages, data=buffer.file_system_data
            )
            self.anon_work_store.clear()
            logger.info(f"Migrated anonymous work ({len(buffer.messages)} message(s)) to project {project.id}")
            return self._navigate(project.id)

        try:
            projects = await self.project_store.get_projects(identity)
        except Exception as e:
            logger.error(f"Failed to list projects: {e}", exc_info=True)
            raise MigrationError(f"Failed to list projects: {e}") from e

        if projects:
            logger.info(f"Routing to most recent project {projects[0].id}")
            return self._navigate(projects[0].id)

        project = await self._create_project(
            f"New Design #{self._sequence()}", messages=[], data={}
        )
        logger.info(f"Created empty project {project.id}")
        return self._navigate(project.id)

    async def _create_project(self, name: str, messages: list, data: dict) -> Project:
        try:
            return await self.project_store.create_project(name=name, messages=messages, data=data)
        except Exception as e:
            logger.error(f"Failed to create project '{name}': {e}", exc_info=True)
            raise MigrationError(f"Failed to create project '{name}': {e}") from e

    def _navigate(self, project_id: str) -> str:
        self.router.navigate(f"/{project_id}")
        return project_id


class AuthFlow:
    """
    Sign-in and sign-up followed by migration, guarded by a single loading flag.

    `is_loading` is true for the whole call and always resets, whether the
    call succeeds, fails, or raises.
    """

    def __init__(self, authenticator: Authenticator, migration: SessionMigrationManager) -> None:
        self.authenticator = authenticator
        self.migration = migration
        self.is_loading = False

    async def sign_in(self, email: str, password: str) -> AuthResult:
        return await self._authenticate(self.authenticator.sign_in, email, password)

    async def sign_up(self, email: str, password: str) -> AuthResult:
        return await self._authenticate(self.authenticator.sign_up, email, password)

    async def _authenticate(
        self,
        action: Callable[[str, str], Awaitable[AuthResult]],
        email: str,
        password: str,
    ) -> AuthResult:
        if self.is_loading:
            raise AuthInProgressError("Authentication is already in progress.")

        self.is_loading = True
        try:
            result = await action(email, password)
            if result.success:
                await self.migration.migrate(result.identity)
            else:
                logger.info(f"Authentication failed: {result.error}")
            return result
        finally:
            self.is_loading = False
