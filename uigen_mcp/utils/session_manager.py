from uigen_mcp.chat.orchestrator import ChatSessionOrchestrator
from uigen_mcp.interpreter import ToolCommandInterpreter
from uigen_mcp.tools.edit_tool import TextEditorTool
from uigen_mcp.tools.file_manager_tool import FileManagerTool
from uigen_mcp.utils.anon_work_store import AnonWorkStore
from uigen_mcp.vfs.file_system import VirtualFileSystem


class SessionManager:
    """Manages the chat sessions (and their virtual file systems) of all clients."""

    def __init__(
        self,
        editor_tool: TextEditorTool | None = None,
        file_manager_tool: FileManagerTool | None = None,
    ) -> None:
        # Simple dict as an in-process session storage.
        # For a real application, this could be Redis or another persistent store.
        self._storage: dict[str, ChatSessionOrchestrator] = {}
        self._editor_tool = editor_tool or TextEditorTool()
        self._file_manager_tool = file_manager_tool or FileManagerTool()

    def get_session(self, session_id: str = "default") -> ChatSessionOrchestrator:
        """Returns or creates the chat session for a given id."""
        if session_id not in self._storage:
            file_system = VirtualFileSystem()
            self._storage[session_id] = ChatSessionOrchestrator(
                file_system=file_system,
                anon_work_store=AnonWorkStore(),
                interpreter=ToolCommandInterpreter(
                    file_system, self._editor_tool, self._file_manager_tool
                ),
            )
        return self._storage[session_id]

    async def close_session(self, session_id: str) -> None:
        session = self._storage.pop(session_id, None)
        if session is not None:
            await session.close()
