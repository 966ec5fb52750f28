from uigen_mcp.tools.utils.constants import MAX_RESPONSE_LEN, TRUNCATED_MESSAGE


def maybe_truncate(content: str, truncate_after: int | None = MAX_RESPONSE_LEN) -> str:
    """Truncate content and append a notice if content exceeds the specified length."""
    if not truncate_after or len(content) <= truncate_after:
        return content
    return content[:truncate_after] + TRUNCATED_MESSAGE


def make_numbered_output(
    file_content: str,
    file_descriptor: str,
    init_line: int = 1,
    truncate_after: int | None = MAX_RESPONSE_LEN,
) -> str:
    """Render content the way `cat -n` would, for the agent to read back."""
    file_content = maybe_truncate(file_content, truncate_after).expandtabs()
    file_content = "\n".join(
        [f"{i + init_line:6}\t{line}" for i, line in enumerate(file_content.split("\n"))]
    )
    return f"Here's the result of running `cat -n` on {file_descriptor}:\n" + file_content + "\n"


def format_directory_listing(directory: str, entries: list[str], depth: int) -> str:
    """List the entries of an implicit directory, one per line."""
    if not entries:
        return f"The directory {directory} is empty."
    listing = "\n".join(entries)
    return f"Here's the files and directories up to {depth} levels deep in {directory}:\n{listing}\n"
