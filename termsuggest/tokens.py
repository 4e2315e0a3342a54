"""Token source: splits the command line into the tokens of the current command.

Only as much shell syntax as completion needs is understood: whitespace
separates tokens unless quoted, backslashes escape the next character and
unquoted control operators start a new command.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import IS_WINDOWS
from .models import ShellKind, TokenType

__all__ = ["Command", "Token", "get_command", "get_token_type"]

# Longest first, so "||" is not read as two pipes
CONTROL_OPERATORS = ("||", "&&", "|&", "|", ";", "&", "(")

_DEFAULT_RESET_SEQUENCES = (">", ">>", "<", "2>", "2>>", "&>", "&>>", "|", "|&", "&&", "||", "&", ";", "(", "{", "<<")

COMMAND_RESET_SEQUENCES: dict[ShellKind, tuple[str, ...]] = {
    ShellKind.BASH: _DEFAULT_RESET_SEQUENCES,
    ShellKind.ZSH: (*_DEFAULT_RESET_SEQUENCES, "<<<", ";;"),
    ShellKind.FISH: (">", ">>", "<", "2>", "2>>", "|", "&|", "&&", "||", "&", ";", "(", "and", "or", "not"),
    ShellKind.POWERSHELL: (">", ">>", "<", "2>", "2>>", "*>", "*>>", "|", ";", "-and", "-or", "-not", "!", "-band", "-bor", "-bnot", "-bxor", "-xor"),
}


@dataclass(frozen=True)
class Token:
    """A lexed token; `text` has quotes and escapes removed."""

    text: str
    start: int
    end: int


@dataclass(frozen=True)
class Command:
    """Tokens of the command the cursor is in.

    The last token is the one under or left of the cursor; it is empty when
    the cursor follows whitespace.
    """

    tokens: tuple[Token, ...]
    line: str
    cursor: int

    @property
    def current_token(self) -> Token:
        """Return the token being completed."""
        return self.tokens[-1]

    @property
    def command_word(self) -> str:
        """Return the text of the leading command word ("" while it is being typed)."""
        return self.tokens[0].text if len(self.tokens) > 1 else ""

    @property
    def texts(self) -> list[str]:
        """Return the text of every token."""
        return [t.text for t in self.tokens]


def get_command(command_line: str, cursor_position: int, escapes: bool = not IS_WINDOWS) -> Command | None:
    """Tokenize the command segment ending at the cursor.

    Args:
        command_line: The raw command line
        cursor_position: Cursor offset in `command_line`
        escapes: Whether a backslash escapes the next character

    Returns:
        The command, or None if the cursor offset is negative
    """
    if cursor_position < 0:
        return None
    cursor_position = min(cursor_position, len(command_line))
    text = command_line[:cursor_position]
    tokens: list[Token] = []
    buf: list[str] = []
    start: int | None = None
    quote: str | None = None
    i = 0

    def flush(end: int) -> None:
        nonlocal start
        if start is not None:
            tokens.append(Token("".join(buf), start, end))
        buf.clear()
        start = None

    while i < len(text):
        char = text[i]
        if quote:
            if char == quote:
                quote = None
            elif char == "\\" and quote == '"' and escapes and i + 1 < len(text):
                i += 1
                buf.append(text[i])
            else:
                buf.append(char)
            i += 1
            continue
        if char in "'\"":
            if start is None:
                start = i
            quote = char
            i += 1
            continue
        if char == "\\" and escapes and i + 1 < len(text):
            if start is None:
                start = i
            buf.append(text[i + 1])
            i += 2
            continue
        if char.isspace():
            flush(i)
            i += 1
            continue
        operator = next((op for op in CONTROL_OPERATORS if text.startswith(op, i)), None)
        if operator:
            flush(i)
            tokens.clear()
            i += len(operator)
            continue
        if start is None:
            start = i
        buf.append(char)
        i += 1

    if start is not None:
        flush(len(text))
    else:
        tokens.append(Token("", cursor_position, cursor_position))
    return Command(tuple(tokens), command_line, cursor_position)


def _ends_with_sequence(text: str, sequence: str) -> bool:
    if not text.endswith(sequence):
        return False
    if not sequence[0].isalpha() and sequence[0] != "-":
        return True
    # word-like operators ("and", "-or") must stand alone
    head = text[: -len(sequence)]
    return not head or head[-1].isspace()


def get_token_type(command_line: str, cursor_position: int, shell_kind: ShellKind | None = None) -> TokenType:
    """Classify the cursor position as a command name or a later token."""
    space_index = command_line[:cursor_position].rfind(" ")
    if space_index == -1:
        return TokenType.COMMAND
    previous = command_line[: space_index + 1].strip()
    if not previous:
        return TokenType.COMMAND
    sequences = COMMAND_RESET_SEQUENCES.get(shell_kind, _DEFAULT_RESET_SEQUENCES) if shell_kind else _DEFAULT_RESET_SEQUENCES
    if any(_ends_with_sequence(previous, seq) for seq in sequences):
        return TokenType.COMMAND
    return TokenType.OTHER
