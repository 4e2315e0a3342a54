"""Candidate aggregation across the spec catalog.

In the command-name position, specs whose labels match an available
executable are offered first, followed by every other executable. In later
positions, the spec of the command word is resolved and its arguments,
subcommands and options are offered, in that order. Labels are unique in the
result: the first candidate with a given label wins.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .constants import EXTENSION_PATTERN, IS_WINDOWS
from .models import CancellationToken, CompletionCandidate, CompletionKind, ExecutableEntry, TokenType
from .prefix import replacement_range
from .resolver import ResolutionContext, resolve
from .specs.models import CommandSpec, Suggestion
from .tokens import Command

if TYPE_CHECKING:
    import logging

    from .generators import GeneratorExecutor

__all__ = [
    "Aggregation",
    "CandidateAggregator",
    "CandidateList",
    "matches_executable",
    "remove_file_extension",
]


def remove_file_extension(label: str) -> str:
    """Strip one trailing extension-like suffix ("code.cmd" -> "code")."""
    stripped = EXTENSION_PATTERN.sub("", label)
    return stripped or label  # dotfiles keep their name


def matches_executable(spec_label: str, executable_label: str, strip_extensions: bool) -> bool:
    """Return True if the executable provides the command named `spec_label`.

    Args:
        spec_label: A label of a spec
        executable_label: The executable's name
        strip_extensions: Whether executables carry extensions ("code.exe")
    """
    if strip_extensions:
        return executable_label == spec_label or remove_file_extension(executable_label) == spec_label
    return executable_label.startswith(spec_label)


class CandidateList:
    """Ordered candidates with unique labels; the first writer wins."""

    def __init__(self, cursor_position: int, prefix: str) -> None:
        self.cursor_position = cursor_position
        self.prefix = prefix
        self._items: list[CompletionCandidate] = []
        self._labels: set[str] = set()

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, label: object) -> bool:
        return label in self._labels

    @property
    def items(self) -> list[CompletionCandidate]:
        """Return the candidates in insertion order."""
        return list(self._items)

    def add(
        self,
        label: str,
        detail: str = "",
        documentation: str | None = None,
        kind: CompletionKind = CompletionKind.METHOD,
    ) -> bool:
        """Append a candidate unless its label is already present.

        Returns:
            True if the candidate was added
        """
        if label in self._labels:
            return False
        start, length = replacement_range(self.prefix, self.cursor_position)
        self._items.append(CompletionCandidate(label, detail, documentation, start, length, kind))
        self._labels.add(label)
        return True

    def add_suggestions(self, suggestions: Iterable[Suggestion], kind: CompletionKind) -> None:
        """Append one candidate per label of each suggestion."""
        for suggestion in suggestions:
            for label in suggestion.labels:
                self.add(label, documentation=suggestion.description or None, kind=kind)


@dataclass
class Aggregation:
    """Outcome of an aggregation pass."""

    candidates: CandidateList
    files_requested: bool = False
    folders_requested: bool = False
    has_current_arg: bool = False
    cancelled: bool = False


class CandidateAggregator:
    """Turns specs, executables and resolution contexts into candidates."""

    def __init__(self, log: logging.Logger, executor: GeneratorExecutor, strip_extensions: bool = IS_WINDOWS) -> None:
        """Initialize.

        Args:
            log: Logger instance
            executor: Runs argument generators
            strip_extensions: Whether executables carry extensions ("code.exe")
        """
        self.log = log
        self.executor = executor
        self.strip_extensions = strip_extensions

    async def collect(  # noqa: PLR0913
        self,
        specs: Iterable[CommandSpec],
        command_line: str,
        cursor_position: int,
        prefix: str,
        executables: Sequence[ExecutableEntry],
        token_type: TokenType,
        command: Command | None,
        cwd: str | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Aggregation:
        """Aggregate the candidates of every spec, in catalog order.

        Args:
            specs: The spec catalog
            command_line: The raw command line
            cursor_position: Cursor offset in `command_line`
            prefix: The word being completed
            executables: Commands available to the shell
            token_type: Whether the cursor is on the command name
            command: The tokenized command, None when unavailable
            cwd: The shell's current directory
            cancellation: Checked before each spec

        Returns:
            The aggregation; on cancellation, what was gathered so far
        """
        result = Aggregation(CandidateList(cursor_position, prefix))

        for spec in specs:
            if cancellation is not None and cancellation.is_cancellation_requested:
                self.log.debug("Completion of %r cancelled", command_line)
                result.cancelled = True
                return result
            for label in spec.labels:
                executable = self._find_executable(label, executables)
                if executable is None:
                    continue
                if token_type == TokenType.COMMAND:
                    if executable.kind != CompletionKind.ALIAS:
                        result.candidates.add(label, spec.description, executable.detail or None, CompletionKind.METHOD)
                    continue
                if command is None or not self._is_command_word(label, command, executables):
                    continue
                context = resolve(spec, command)
                result.has_current_arg = result.has_current_arg or context.current_arg is not None
                await self._add_context(context, command, cwd, result)

        if token_type == TokenType.COMMAND:
            for executable in executables:
                result.candidates.add(executable.label, executable.detail, None, executable.kind)
            result.files_requested = True
            result.folders_requested = True
        elif not result.candidates and not result.files_requested and not result.folders_requested and not result.has_current_arg:
            result.files_requested = True
            result.folders_requested = True
        return result

    def _find_executable(self, label: str, executables: Sequence[ExecutableEntry]) -> ExecutableEntry | None:
        for executable in executables:
            if matches_executable(label, executable.label, self.strip_extensions):
                return executable
        return None

    def _is_command_word(self, label: str, command: Command, executables: Sequence[ExecutableEntry]) -> bool:
        """Return True if the command word runs the command named `label`, directly or through an alias."""
        word = command.command_word
        if not word:
            return False
        if self.strip_extensions:
            word = remove_file_extension(word)
        for executable in executables:
            definition = executable.definition_command or executable.label
            name = executable.label
            if self.strip_extensions:
                definition = remove_file_extension(definition)
                name = remove_file_extension(name)
            if definition == label and name == word:
                return True
        return False

    async def _add_context(self, context: ResolutionContext, command: Command, cwd: str | None, result: Aggregation) -> None:
        candidates = result.candidates
        if context.suggest_arguments and context.current_arg is not None:
            generated = await self.executor.execute(context.current_arg, command.texts, cwd)
            result.files_requested = result.files_requested or generated.files_requested
            result.folders_requested = result.folders_requested or generated.folders_requested
            candidates.add_suggestions(generated.suggestions, CompletionKind.ARGUMENT)
            candidates.add_suggestions(context.current_arg.suggestions, CompletionKind.ARGUMENT)
        if context.suggest_subcommands:
            for subcommand in context.subcommands:
                for label in subcommand.labels:
                    candidates.add(label, documentation=subcommand.description or None, kind=CompletionKind.METHOD)
        if context.suggest_options:
            for option in context.options:
                for label in option.labels:
                    candidates.add(label, documentation=option.description or None, kind=CompletionKind.FLAG)
