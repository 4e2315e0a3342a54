"""Executables reachable through the search path."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import TYPE_CHECKING

import aiofiles.os

from .constants import IS_WINDOWS
from .models import CompletionKind, ExecutableEntry

if TYPE_CHECKING:
    import logging

__all__ = ["DEFAULT_PATHEXT", "PathExecutableCache"]

DEFAULT_PATHEXT = ".COM;.EXE;.BAT;.CMD"


class PathExecutableCache:
    """Lists the executables of `PATH`, caching the listing per `PATH` value.

    A label found in several directories is reported once, for the first
    directory in `PATH` order.
    """

    def __init__(self, log: logging.Logger, windows: bool = IS_WINDOWS) -> None:
        self.log = log
        self.windows = windows
        self._path_value: str | None = None
        self._entries: list[ExecutableEntry] = []

    def clear(self) -> None:
        """Drop the cached listing."""
        self._path_value = None
        self._entries = []

    async def get_executables(self, env: Mapping[str, str] | None = None) -> list[ExecutableEntry]:
        """Return the executables of `env["PATH"]` (defaults to the process environment)."""
        env = os.environ if env is None else env
        path_value = env.get("PATH", "")
        if path_value != self._path_value:
            self._entries = await self._list_path(path_value, env.get("PATHEXT", DEFAULT_PATHEXT))
            self._path_value = path_value
        return self._entries

    async def _list_path(self, path_value: str, pathext: str) -> list[ExecutableEntry]:
        extensions = {ext.lower() for ext in pathext.split(";") if ext}
        seen: set[str] = set()
        entries: list[ExecutableEntry] = []
        for directory in path_value.split(os.pathsep):
            if not directory:
                continue
            try:
                names = await aiofiles.os.listdir(directory)
            except OSError as e:
                self.log.debug("Skipping %s: %s", directory, e)
                continue
            for name in sorted(names):
                if name in seen:
                    continue
                full_path = os.path.join(directory, name)
                if not await self._is_executable(full_path, name, extensions):
                    continue
                seen.add(name)
                entries.append(ExecutableEntry(name, CompletionKind.METHOD, full_path))
        self.log.debug("Found %d executables in PATH", len(entries))
        return entries

    async def _is_executable(self, full_path: str, name: str, extensions: set[str]) -> bool:
        try:
            if not await aiofiles.os.path.isfile(full_path):
                return False
        except OSError:
            return False
        if self.windows:
            return os.path.splitext(name)[1].lower() in extensions
        return await aiofiles.os.access(full_path, os.X_OK)
