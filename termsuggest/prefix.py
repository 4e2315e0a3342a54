"""Prefix extraction: the text fragment a candidate replaces."""

import re

__all__ = ["get_prefix", "replacement_range"]

_TRAILING_WORD = re.compile(r"\S+$")


def get_prefix(command_line: str, cursor_position: int) -> str:
    """Return the word fragment being completed.

    Completions only trigger at word boundaries: when the cursor sits inside
    a word, the prefix is empty.

    Args:
        command_line: The raw command line
        cursor_position: Cursor offset in `command_line`

    Returns:
        The trailing run of non-whitespace characters before the cursor,
        or an empty string
    """
    if not command_line.strip():
        return ""

    if cursor_position < len(command_line) and not command_line[cursor_position].isspace():
        return ""

    match = _TRAILING_WORD.search(command_line[:cursor_position])
    return match.group(0) if match else ""


def replacement_range(prefix: str, cursor_position: int) -> tuple[int, int]:
    """Return (start, length) of the text a candidate replaces.

    The range always ends at the cursor.
    """
    return (cursor_position - len(prefix), len(prefix))
