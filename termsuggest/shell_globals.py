"""Shell builtins and aliases, fetched from a live shell and cached per shell kind."""

from __future__ import annotations

import asyncio
import re
from collections.abc import Callable, Collection
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .constants import DEFAULT_SHELL_TIMEOUT
from .models import CompletionKind, ExecutableEntry, ShellKind
from .process import CapturedProcess

if TYPE_CHECKING:
    import logging

__all__ = ["SHELL_QUERIES", "ShellGlobalsCache", "ShellQuery", "parse_aliases", "parse_names"]

_ALIAS_LINE = re.compile(r"^(?:alias\s+)?([^=\s]+)=(.*)$")


def parse_names(output: str) -> list[ExecutableEntry]:
    """One builtin per line (commas also separate names, as fish prints them)."""
    names = (name.strip() for line in output.splitlines() for name in line.split(","))
    return [ExecutableEntry(name, CompletionKind.METHOD, "Shell builtin") for name in names if name]


def parse_aliases(output: str) -> list[ExecutableEntry]:
    """Parse `alias` listings: "alias ll='ls -alF'" (bash) or "ll='ls -alF'" (zsh)."""
    entries: list[ExecutableEntry] = []
    for line in output.splitlines():
        match = _ALIAS_LINE.match(line.strip())
        if not match:
            continue
        name, value = match.groups()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        words = value.split()
        entries.append(ExecutableEntry(name, CompletionKind.ALIAS, value, words[0] if words else None))
    return entries


def parse_pwsh_commands(output: str) -> list[ExecutableEntry]:
    """Parse "name<TAB>type<TAB>resolved command" lines printed by pwsh."""
    entries: list[ExecutableEntry] = []
    for line in output.splitlines():
        name, _, rest = line.partition("\t")
        command_type, _, resolved = rest.partition("\t")
        if not name.strip():
            continue
        if command_type.strip() == "Alias":
            entries.append(ExecutableEntry(name.strip(), CompletionKind.ALIAS, resolved.strip(), resolved.strip() or None))
        else:
            entries.append(ExecutableEntry(name.strip(), CompletionKind.METHOD, command_type.strip()))
    return entries


@dataclass(frozen=True)
class ShellQuery:
    """A command run in a shell and the parser of its output."""

    args: tuple[str, ...]
    parse: Callable[[str], list[ExecutableEntry]]


_PWSH_SCRIPT = 'Get-Command -CommandType Cmdlet,Function,Alias | ForEach-Object { "{0}`t{1}`t{2}" -f $_.Name, $_.CommandType, $_.ResolvedCommandName }'

SHELL_QUERIES: dict[ShellKind, tuple[ShellQuery, ...]] = {
    ShellKind.BASH: (
        ShellQuery(("bash", "-c", "compgen -b"), parse_names),
        ShellQuery(("bash", "-ic", "alias"), parse_aliases),
    ),
    ShellKind.ZSH: (
        ShellQuery(("zsh", "-c", 'printf "%s\\n" ${(k)builtins}'), parse_names),
        ShellQuery(("zsh", "-ic", "alias"), parse_aliases),
    ),
    ShellKind.FISH: (
        ShellQuery(("fish", "-c", "builtin -n"), parse_names),
        ShellQuery(("fish", "-c", "functions -n"), parse_names),
    ),
    ShellKind.POWERSHELL: (ShellQuery(("pwsh", "-NoProfile", "-Command", _PWSH_SCRIPT), parse_pwsh_commands),),
}


class ShellGlobalsCache:
    """Builtin commands and aliases per shell kind.

    Entries are fetched on the first request for a shell kind and kept for
    the life of the cache. Shell kinds without a query yield no entries.
    """

    def __init__(
        self,
        log: logging.Logger,
        timeout: float = DEFAULT_SHELL_TIMEOUT,
        queries: dict[ShellKind, tuple[ShellQuery, ...]] | None = None,
    ) -> None:
        """Initialize.

        Args:
            log: Logger instance
            timeout: Seconds each shell query may run
            queries: Queries per shell kind (defaults to SHELL_QUERIES)
        """
        self.log = log
        self.timeout = timeout
        self.queries = SHELL_QUERIES if queries is None else queries
        self._cache: dict[ShellKind, list[ExecutableEntry]] = {}
        self._lock = asyncio.Lock()

    def __contains__(self, shell_kind: object) -> bool:
        return shell_kind in self._cache

    async def get(self, shell_kind: ShellKind | None, existing: Collection[str] = ()) -> list[ExecutableEntry]:
        """Return the globals of `shell_kind`, minus labels found in `existing`.

        Args:
            shell_kind: The shell the terminal runs
            existing: Labels of commands already found on the search path
        """
        if shell_kind is None or shell_kind not in self.queries:
            self.log.debug("No builtin source for shell %s", shell_kind)
            return []
        entries = self._cache.get(shell_kind)
        if entries is None:
            async with self._lock:
                entries = self._cache.get(shell_kind)
                if entries is None:
                    entries = await self._fetch(shell_kind)
                    if entries is not None:
                        self._cache[shell_kind] = entries
        if not entries:
            return []
        return [e for e in entries if e.label not in existing]

    def clear(self) -> None:
        """Forget every cached shell."""
        self._cache.clear()

    async def _fetch(self, shell_kind: ShellKind) -> list[ExecutableEntry] | None:
        """Run the queries of `shell_kind`; None if none of them could run."""
        entries: list[ExecutableEntry] = []
        seen: set[str] = set()
        succeeded = False
        for query in self.queries[shell_kind]:
            try:
                output = await CapturedProcess(self.timeout).run(*query.args)
            except (OSError, TimeoutError) as e:
                self.log.warning("Error fetching builtin commands with %s: %s", query.args[0], e or type(e).__name__)
                continue
            succeeded = True
            for entry in query.parse(output.stdout):
                if entry.label not in seen:
                    seen.add(entry.label)
                    entries.append(entry)
        if not succeeded:
            return None
        self.log.debug("Found %d globals for %s", len(entries), shell_kind.name)
        return entries
