"""Substring search helpers for the editor tool."""


def find_occurrences(content: str, needle: str) -> list[int]:
    """
    Returns the start offset of every occurrence of `needle` in `content`.

    Overlapping occurrences are counted: "aa" occurs twice in "aaa".
    """
    if not needle:
        return []
    offsets = []
    index = content.find(needle)
    while index != -1:
        offsets.append(index)
        index = content.find(needle, index + 1)
    return offsets
