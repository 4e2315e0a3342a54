"""Shared types: enums, request/response structures and error types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum, StrEnum
from typing import Any

__all__ = [
    "CancellationToken",
    "CompletionCandidate",
    "CompletionKind",
    "CompletionRequest",
    "CompletionResult",
    "ExecutableEntry",
    "ExitCode",
    "ShellKind",
    "SuggestionCategory",
    "TermsuggestError",
    "TokenType",
]


class CompletionKind(StrEnum):
    """Kind of a completion candidate, as shown by the host."""

    METHOD = "method"
    FLAG = "flag"
    ARGUMENT = "argument"
    ALIAS = "alias"
    FOLDER = "folder"
    FILE = "file"


class ShellKind(IntEnum):
    """Shell flavours a terminal may report."""

    SH = 1
    BASH = 2
    FISH = 3
    CSH = 4
    KSH = 5
    ZSH = 6
    COMMAND_PROMPT = 7
    GIT_BASH = 8
    POWERSHELL = 9
    PYTHON = 10
    JULIA = 11
    NUSHELL = 12
    NODE = 13

    @classmethod
    def from_name(cls, name: str) -> ShellKind | None:
        """Return the shell kind matching `name` (e.g. "bash", "pwsh"), if any."""
        key = name.strip().lower()
        aliases = {"pwsh": cls.POWERSHELL, "cmd": cls.COMMAND_PROMPT, "nu": cls.NUSHELL, "gitbash": cls.GIT_BASH}
        if key in aliases:
            return aliases[key]
        try:
            return cls[key.upper().replace("-", "_")]
        except KeyError:
            return None


class TokenType(Enum):
    """Position of the cursor token in its command."""

    COMMAND = "command"
    OTHER = "other"


class SuggestionCategory(Enum):
    """Categories of candidates a resolution may offer, in output order."""

    ARGUMENTS = "arguments"
    SUBCOMMANDS = "subcommands"
    OPTIONS = "options"


class ExitCode(IntEnum):
    """Exit codes for the CLI."""

    SUCCESS = 0
    USAGE_ERROR = 1  # No command line provided, invalid arguments
    CONFIG_ERROR = 2  # Invalid configuration or spec file


class TermsuggestError(Exception):
    """Used for errors which already triggered logging."""


class CancellationToken:
    """Cooperative cancellation flag shared between a host and one request."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def is_cancellation_requested(self) -> bool:
        """Return True once `cancel` was called."""
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation."""
        self._cancelled = True


@dataclass(frozen=True)
class ExecutableEntry:
    """A command reachable from the shell (search path, builtin or alias)."""

    label: str
    kind: CompletionKind = CompletionKind.METHOD
    detail: str = ""
    definition_command: str | None = None  # canonical command an alias resolves to


@dataclass(frozen=True)
class CompletionCandidate:
    """One completion offer."""

    label: str
    detail: str
    documentation: str | None
    replacement_start: int
    replacement_length: int
    kind: CompletionKind

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {
            "label": self.label,
            "detail": self.detail,
            "documentation": self.documentation,
            "replacementStart": self.replacement_start,
            "replacementLength": self.replacement_length,
            "kind": str(self.kind),
        }


@dataclass
class CompletionRequest:
    """Input of one completion request."""

    command_line: str
    cursor_position: int
    available_executables: list[ExecutableEntry] = field(default_factory=list)
    environment: dict[str, str] = field(default_factory=dict)
    cwd: str | None = None
    shell_kind: ShellKind | None = None
    token_type: TokenType | None = None  # computed from the command line when None


@dataclass
class CompletionResult:
    """Output of one completion request."""

    candidates: list[CompletionCandidate] = field(default_factory=list)
    files_requested: bool = False
    folders_requested: bool = False
    resolved_cwd: str | None = None

    @property
    def labels(self) -> list[str]:
        """Return candidate labels in order."""
        return [c.label for c in self.candidates]

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation."""
        return {
            "candidates": [c.to_dict() for c in self.candidates],
            "filesRequested": self.files_requested,
            "foldersRequested": self.folders_requested,
            "resolvedCwd": self.resolved_cwd,
        }
