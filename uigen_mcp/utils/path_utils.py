from uigen_mcp.tools.base import InvalidPathError

ROOT = "/"


def normalize_path(path_str: str) -> str:
    """
    Normalizes a user-provided path into a virtual file system key.

    Args:
        path_str: The path string provided by the agent.

    Returns:
        An absolute, `/`-rooted path without trailing slash, duplicate slashes
        or `.` segments. The root itself is returned as "/".

    Raises:
        InvalidPathError: If the path is not a string, is relative or contains
            a `..` segment.
    """
    if not isinstance(path_str, str):
        raise InvalidPathError(f"Path must be a string, got {type(path_str).__name__}.")

    path = path_str.strip()
    if not path.startswith(ROOT):
        raise InvalidPathError(f"Path '{path_str}' must be absolute and start with '/'.")

    segments = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            raise InvalidPathError(f"Path '{path_str}' must not contain '..' segments.")
        segments.append(segment)

    return ROOT + "/".join(segments)


def parent_of(path: str) -> str:
    """Returns the implicit parent directory of a normalized path."""
    if path == ROOT:
        return ROOT
    head, _, _ = path.rpartition("/")
    return head or ROOT


def is_within(path: str, directory: str) -> bool:
    """True if `path` lies strictly below `directory` (both normalized)."""
    if directory == ROOT:
        return path != ROOT
    return path.startswith(directory + "/")


def base_name(path: str | None) -> str:
    """Last segment of a path, used for display."""
    if not path:
        return "file"
    return path.rstrip("/").split("/")[-1] or path
