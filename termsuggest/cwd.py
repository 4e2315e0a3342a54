"""Working-directory resolution for path listings."""

from __future__ import annotations

import ntpath
import os
import stat

import aiofiles.os

from .constants import IS_WINDOWS

__all__ = ["directory_portion", "resolve_cwd_from_prefix"]


def directory_portion(prefix: str, windows: bool = IS_WINDOWS) -> str:
    """Return the part of `prefix` before its last path separator.

    On Windows the native backslash is preferred and the forward slash is
    only considered when the prefix has no backslash.
    """
    if windows:
        index = prefix.rfind("\\")
        if index == -1:
            index = prefix.rfind("/")
    else:
        index = prefix.rfind("/")
    return "" if index == -1 else prefix[:index]


async def resolve_cwd_from_prefix(prefix: str, current_cwd: str, windows: bool = IS_WINDOWS) -> str:
    """Return the directory a path listing for `prefix` should show.

    The directory portion of the prefix is resolved against `current_cwd`;
    if that names an existing directory it is returned, otherwise
    `current_cwd` is returned unchanged. Never raises.

    Args:
        prefix: The word being completed (e.g. "src/comp")
        current_cwd: The shell's current directory
        windows: Whether Windows path rules apply
    """
    try:
        relative = directory_portion(prefix, windows)
        pathmod = ntpath if windows else os.path
        resolved = pathmod.normpath(pathmod.join(current_cwd, relative))
        result = await aiofiles.os.stat(resolved)
        if stat.S_ISDIR(result.st_mode):
            return resolved
    except (OSError, ValueError):
        pass
    return current_cwd
