"""Spec resolution: find what the cursor token may be, given one command spec.

The walk is a small state machine over the tokens before the cursor:

- a pending option (an option waiting for its value) consumes the next token,
- a token naming an option of the current node may set a pending option,
- a token naming a subcommand descends into it, as long as no positional
  argument was consumed at the current node,
- anything else fills the next positional argument slot.

The cursor token itself never changes the state.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import SuggestionCategory
from .specs.models import ArgSpec, CommandSpec, OptionSpec
from .tokens import Command

__all__ = ["ResolutionContext", "resolve"]


@dataclass(frozen=True)
class ResolutionContext:
    """Where the cursor stands in a spec tree."""

    node: CommandSpec
    current_arg: ArgSpec | None = None
    categories: frozenset[SuggestionCategory] = frozenset()

    @property
    def subcommands(self) -> tuple[CommandSpec, ...]:
        """Subcommands valid at this point."""
        return self.node.subcommands

    @property
    def options(self) -> tuple[OptionSpec, ...]:
        """Options valid at this point."""
        return self.node.options

    @property
    def suggest_arguments(self) -> bool:
        return SuggestionCategory.ARGUMENTS in self.categories

    @property
    def suggest_subcommands(self) -> bool:
        return SuggestionCategory.SUBCOMMANDS in self.categories

    @property
    def suggest_options(self) -> bool:
        return SuggestionCategory.OPTIONS in self.categories


def resolve(spec: CommandSpec, command: Command) -> ResolutionContext:
    """Resolve the context of the cursor token of `command` against `spec`.

    Args:
        spec: Spec of the command word of `command`
        command: The tokenized command

    Returns:
        The resolution context; specs with nothing to offer yield an
        empty category set, never an error
    """
    # skip the command word and the token being typed
    texts = [token.text for token in command.tokens[1:-1]]
    return _resolve_node(spec, texts)


def _option_for(node: CommandSpec, text: str) -> tuple[OptionSpec | None, bool]:
    """Return the option named by `text` and whether its value is attached ("--out=dir")."""
    option = node.find_option(text)
    if option is not None:
        return option, False
    name, sep, _ = text.partition("=")
    if sep and name:
        option = node.find_option(name)
        if option is not None and option.takes_value:
            return option, True
    return None, False


def _resolve_node(node: CommandSpec, texts: list[str]) -> ResolutionContext:
    arg_index = 0  # next positional slot of this node
    consumed = 0  # positional tokens consumed at this node
    pending: OptionSpec | None = None
    pending_index = 0  # slot of pending.args waiting for a value
    pending_count = 0  # values already given to a variadic slot

    for i, text in enumerate(texts):
        if pending is not None:
            value_arg = pending.args[pending_index]
            ends_variadic = value_arg.is_variadic and (
                _option_for(node, text)[0] is not None or (consumed == 0 and node.find_subcommand(text) is not None)
            )
            if not ends_variadic:
                if value_arg.is_variadic:
                    pending_count += 1
                else:
                    pending_index += 1
                    if pending_index >= len(pending.args):
                        pending = None
                continue
            pending = None

        option, attached = _option_for(node, text)
        if option is not None:
            if option.takes_value:
                start = 1 if attached else 0
                if start < len(option.args):
                    pending, pending_index, pending_count = option, start, 0
            continue

        if consumed == 0:
            subcommand = node.find_subcommand(text)
            if subcommand is not None:
                return _resolve_node(subcommand, texts[i + 1 :])

        if _positional_slot(node, arg_index) is not None:
            consumed += 1
            if arg_index < len(node.args):
                arg_index += 1

    categories: set[SuggestionCategory] = set()
    if pending is not None:
        current_arg = pending.args[pending_index]
        categories.add(SuggestionCategory.ARGUMENTS)
        value_required = not current_arg.is_optional and not (current_arg.is_variadic and pending_count)
        if not value_required and node.options:
            categories.add(SuggestionCategory.OPTIONS)
        return ResolutionContext(node, current_arg, frozenset(categories))

    current_arg = _positional_slot(node, arg_index)
    if current_arg is not None:
        categories.add(SuggestionCategory.ARGUMENTS)
    if consumed == 0 and node.subcommands:
        categories.add(SuggestionCategory.SUBCOMMANDS)
    if node.options:
        categories.add(SuggestionCategory.OPTIONS)
    return ResolutionContext(node, current_arg, frozenset(categories))


def _positional_slot(node: CommandSpec, arg_index: int) -> ArgSpec | None:
    """Return the positional slot at `arg_index`; a trailing variadic slot repeats."""
    if arg_index < len(node.args):
        return node.args[arg_index]
    if node.args and node.args[-1].is_variadic:
        return node.args[-1]
    return None
