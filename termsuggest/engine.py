"""Completion engine: the public boundary of a completion request.

Usage:
    engine = SuggestEngine()
    result = await engine.provide(
        CompletionRequest("git chec", 8, executables, env, cwd="/repo", shell_kind=ShellKind.BASH)
    )
    engine.dispose()
"""

from __future__ import annotations

import dataclasses
import os
from typing import TYPE_CHECKING

from .aggregator import CandidateAggregator
from .config import Configuration
from .constants import DEFAULT_GENERATOR_TIMEOUT, DEFAULT_SHELL_TIMEOUT, IS_WINDOWS, TRIGGER_CHARACTERS
from .cwd import resolve_cwd_from_prefix
from .generators import GeneratorExecutor
from .logging_setup import get_logger, request_context
from .models import CancellationToken, CompletionCandidate, CompletionKind, CompletionRequest, CompletionResult
from .prefix import get_prefix
from .shell_globals import ShellGlobalsCache
from .specs.catalog import SpecCatalog
from .tokens import get_command, get_token_type

if TYPE_CHECKING:
    import logging
    from collections.abc import Mapping

__all__ = ["SuggestEngine"]

HOME_SHORTHAND = "~"


class SuggestEngine:
    """Resolves completion requests against a spec catalog.

    The engine owns the shell globals cache; independent engines never share
    state. Call `dispose` when done with it.
    """

    trigger_characters = TRIGGER_CHARACTERS

    def __init__(
        self,
        catalog: SpecCatalog | None = None,
        *,
        log: logging.Logger | None = None,
        generator_timeout: float = DEFAULT_GENERATOR_TIMEOUT,
        shell_timeout: float = DEFAULT_SHELL_TIMEOUT,
        windows: bool = IS_WINDOWS,
        strip_extensions: bool | None = None,
        shell_globals: ShellGlobalsCache | None = None,
    ) -> None:
        """Initialize.

        Args:
            catalog: The specs to use (defaults to the built-in ones)
            log: Logger instance
            generator_timeout: Seconds a script generator may run
            shell_timeout: Seconds a shell may take to list its builtins
            windows: Whether Windows path rules apply
            strip_extensions: Whether executables carry extensions (defaults to `windows`)
            shell_globals: Globals cache to use instead of a fresh one
        """
        self.log = log or get_logger("engine")
        self.catalog = catalog if catalog is not None else SpecCatalog()
        self.windows = windows
        self.strip_extensions = windows if strip_extensions is None else strip_extensions
        self.shell_globals = shell_globals or ShellGlobalsCache(get_logger("shell_globals"), shell_timeout)
        self.executor = GeneratorExecutor(get_logger("generators"), generator_timeout)
        self.aggregator = CandidateAggregator(get_logger("aggregator"), self.executor, self.strip_extensions)

    @classmethod
    def from_config(cls, config: Configuration, log: logging.Logger | None = None) -> SuggestEngine:
        """Build an engine and its catalog from the `[termsuggest]` configuration.

        Raises:
            TermsuggestError: if a spec file is missing or malformed
        """
        log = log or get_logger("engine")
        catalog = SpecCatalog.load(
            log,
            spec_paths=config.get_str_list("spec_paths"),
            disabled=config.get_str_list("disabled_specs"),
            include_builtins=config.get_bool("builtin_specs", True),
        )
        return cls(
            catalog,
            log=log,
            generator_timeout=config.get_float("generator_timeout", DEFAULT_GENERATOR_TIMEOUT),
            shell_timeout=config.get_float("shell_timeout", DEFAULT_SHELL_TIMEOUT),
            strip_extensions=config.get_bool("strip_extensions", IS_WINDOWS),
        )

    def dispose(self) -> None:
        """Release cached state."""
        self.shell_globals.clear()

    async def provide(self, request: CompletionRequest, cancellation: CancellationToken | None = None) -> CompletionResult:
        """Return the completion candidates for `request`.

        Never raises: failures yield fewer (or no) candidates. A cancelled
        request returns what was gathered so far.

        Args:
            request: The command line, cursor and shell context
            cancellation: Checked between specs
        """
        if cancellation is not None and cancellation.is_cancellation_requested:
            return CompletionResult()
        with request_context(request.command_line):
            try:
                return await self._provide(request, cancellation)
            except Exception:  # pylint: disable=W0718
                self.log.critical("Unhandled exception while completing %r", request.command_line, exc_info=True)
                return CompletionResult()

    async def _provide(self, request: CompletionRequest, cancellation: CancellationToken | None) -> CompletionResult:
        existing = {e.label for e in request.available_executables}
        shell_globals = await self.shell_globals.get(request.shell_kind, existing)
        executables = [*request.available_executables, *shell_globals]

        line, cursor = request.command_line, request.cursor_position
        prefix = get_prefix(line, cursor)
        token_type = request.token_type or get_token_type(line, cursor, request.shell_kind)
        command = None
        if request.cwd is None:
            self.log.debug("No working directory: spec arguments are not resolved")
        else:
            command = get_command(line, cursor, escapes=not self.windows)

        aggregation = await self.aggregator.collect(
            self.catalog,
            line,
            cursor,
            prefix,
            executables,
            token_type,
            command,
            request.cwd,
            cancellation,
        )
        result = CompletionResult(
            _apply_home_shorthand(aggregation.candidates.items, request.environment, self.windows),
            aggregation.files_requested,
            aggregation.folders_requested,
        )
        if aggregation.cancelled:
            return result
        if request.cwd is not None and (result.files_requested or result.folders_requested):
            result.resolved_cwd = await resolve_cwd_from_prefix(prefix, request.cwd, self.windows)
        return result


def _apply_home_shorthand(candidates: list[CompletionCandidate], env: Mapping[str, str], windows: bool) -> list[CompletionCandidate]:
    """Present a "~" candidate as the home folder when HOME is known."""
    home = env.get("HOME")
    if not home:
        return candidates
    separator = "\\" if windows else "/"
    friendly = home if home.endswith((separator, os.sep)) else home + separator
    return [
        dataclasses.replace(c, documentation=friendly, kind=CompletionKind.FOLDER) if c.label == HOME_SHORTHAND else c
        for c in candidates
    ]
