"""
In-memory virtual file system holding the files of one project.

Files are keyed by normalized absolute path. Directories are not stored: a
directory exists implicitly as long as at least one file lives below it.
"""

import logging
from collections.abc import Iterator, Mapping
from threading import Lock
from typing import Any

from uigen_mcp.tools.base import ConflictError, InvalidPathError, NotFoundError
from uigen_mcp.utils.path_utils import ROOT, is_within, normalize_path, parent_of

logger = logging.getLogger(__name__)

ProjectSnapshot = dict[str, dict[str, str]]


class VirtualFileSystem:
    """
    Path-keyed project tree operated on by tool invocations.

    Every mutation builds the complete new mapping and swaps it in under a
    lock, so a reader only ever sees the state before or after a mutation.
    """

    def __init__(self, files: Mapping[str, str] | None = None) -> None:
        self._lock = Lock()
        self._files: dict[str, str] = {}
        if files:
            self._files = self._build_mapping(files.items())

    # --- Queries ---

    def read(self, path: str) -> str:
        key = normalize_path(path)
        files = self._files
        if key not in files:
            raise NotFoundError(f"File not found: {key}")
        return files[key]

    def exists(self, path: str) -> bool:
        key = normalize_path(path)
        return key in self._files or self.is_directory(key)

    def is_file(self, path: str) -> bool:
        return normalize_path(path) in self._files

    def is_directory(self, path: str) -> bool:
        key = normalize_path(path)
        if key == ROOT:
            return True
        return any(is_within(existing, key) for existing in self._files)

    def list_directory(self, path: str = ROOT, depth: int = 2) -> list[str]:
        """
        Lists files and implicit sub-directories below `path`.

        Directories are reported with a trailing slash. Entries deeper than
        `depth` levels below `path` are omitted.
        """
        directory = normalize_path(path)
        if not self.is_directory(directory):
            raise NotFoundError(f"Directory not found: {directory}")

        prefix_len = 0 if directory == ROOT else len(directory)
        entries: set[str] = set()
        for file_path in self._files:
            if not is_within(file_path, directory):
                continue
            relative = file_path[prefix_len:].lstrip("/").split("/")
            for level in range(1, min(len(relative), depth) + 1):
                entry = directory.rstrip("/") + "/" + "/".join(relative[:level])
                if level < len(relative):
                    entry += "/"
                entries.add(entry)
        return sorted(entries)

    # --- Mutations ---

    def write(self, path: str, content: str) -> None:
        """Creates or replaces the file at `path`."""
        key = normalize_path(path)
        if key == ROOT:
            raise InvalidPathError("Cannot write to the root directory.")
        if not isinstance(content, str):
            raise TypeError(f"File content must be a string, got {type(content).__name__}.")

        with self._lock:
            if self._is_directory_unlocked(key):
                raise ConflictError(f"A directory already exists at: {key}")
            for ancestor in self._ancestors(key):
                if ancestor in self._files:
                    raise ConflictError(f"Cannot create {key}: {ancestor} is a file.")
            files = dict(self._files)
            files[key] = content
            self._files = files
        logger.debug(f"Wrote {key} ({len(content)} chars)")

    def remove(self, path: str) -> None:
        """Removes a file, or every file below an implicit directory."""
        key = normalize_path(path)
        with self._lock:
            if key in self._files:
                files = dict(self._files)
                del files[key]
            elif self._is_directory_unlocked(key) and key != ROOT:
                files = {p: c for p, c in self._files.items() if not is_within(p, key)}
            else:
                raise NotFoundError(f"File not found: {key}")
            removed = len(self._files) - len(files)
            self._files = files
        logger.debug(f"Removed {key} ({removed} file(s))")

    def rename(self, old_path: str, new_path: str) -> None:
        """Moves a file, or every file below an implicit directory."""
        source = normalize_path(old_path)
        target = normalize_path(new_path)
        if source == ROOT or target == ROOT:
            raise InvalidPathError("The root directory cannot be renamed.")

        with self._lock:
            if source in self._files:
                moves = {source: target}
            elif self._is_directory_unlocked(source):
                if is_within(target, source):
                    raise ConflictError(f"Cannot move {source} into itself ({target}).")
                moves = {
                    p: target + p[len(source):]
                    for p in self._files
                    if is_within(p, source)
                }
            else:
                raise NotFoundError(f"File not found: {source}")

            if source == target or target in self._files or self._is_directory_unlocked(target):
                raise ConflictError(f"Destination already exists: {target}")

            files = {p: c for p, c in self._files.items() if p not in moves}
            for destination in moves.values():
                for ancestor in self._ancestors(destination):
                    if ancestor in files:
                        raise ConflictError(f"Cannot move to {destination}: {ancestor} is a file.")
            for origin, destination in moves.items():
                files[destination] = self._files[origin]
            self._files = files
        logger.debug(f"Renamed {source} -> {target} ({len(moves)} file(s))")

    # --- Snapshots ---

    def serialize(self) -> ProjectSnapshot:
        """Returns the project snapshot, ordered by path."""
        files = self._files
        return {path: {"type": "file", "content": files[path]} for path in sorted(files)}

    def deserialize(self, snapshot: Mapping[str, Any]) -> None:
        """
        Replaces the entire state with the contents of `snapshot`.

        Entries may be `{"type": "file", "content": ...}` objects or plain
        strings. Directory entries are skipped since directories are implicit.
        """
        entries = []
        for path, entry in snapshot.items():
            if isinstance(entry, str):
                entries.append((path, entry))
            elif isinstance(entry, Mapping):
                if entry.get("type", "file") == "directory":
                    continue
                entries.append((path, entry.get("content") or ""))
            else:
                raise InvalidPathError(f"Unsupported snapshot entry for {path}: {entry!r}")
        files = self._build_mapping(entries)
        with self._lock:
            self._files = files
        logger.debug(f"Loaded snapshot with {len(files)} file(s)")

    @classmethod
    def from_snapshot(cls, snapshot: Mapping[str, Any]) -> "VirtualFileSystem":
        file_system = cls()
        file_system.deserialize(snapshot)
        return file_system

    # --- Helpers ---

    def _is_directory_unlocked(self, key: str) -> bool:
        if key == ROOT:
            return True
        return any(is_within(existing, key) for existing in self._files)

    @staticmethod
    def _ancestors(key: str) -> Iterator[str]:
        parent = parent_of(key)
        while parent != ROOT:
            yield parent
            parent = parent_of(parent)

    @classmethod
    def _build_mapping(cls, entries) -> dict[str, str]:
        files: dict[str, str] = {}
        for path, content in entries:
            key = normalize_path(path)
            if key == ROOT:
                raise InvalidPathError("Cannot store a file at the root directory.")
            if key in files:
                raise ConflictError(f"Duplicate path in snapshot: {key}")
            files[key] = content
        for key in files:
            shadowed = next((ancestor for ancestor in cls._ancestors(key) if ancestor in files), None)
            if shadowed is not None:
                raise ConflictError(f"{shadowed} is a file and cannot contain {key}")
        return files

    # Defined after every method annotated with the builtin `list`.
    def list(self) -> "list[str]":
        """Returns all file paths in stable (sorted) order."""
        return sorted(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        try:
            return normalize_path(path) in self._files
        except InvalidPathError:
            return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VirtualFileSystem):
            return NotImplemented
        return self._files == other._files

    def __repr__(self) -> str:
        return f"VirtualFileSystem(files={self.list()!r})"
