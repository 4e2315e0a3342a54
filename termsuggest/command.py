"""termsuggest command line interface.

Prints the completion candidates of a command line, as the engine would
return them to a terminal host:

    termsuggest [--debug LOGFILE] [--config PATH] [--shell NAME] [--cwd DIR]
                [--cursor N] [--json] COMMAND_LINE
"""

import asyncio
import json
import os
import sys

from .ansi import KindStyles, colorize, should_colorize
from .config import Configuration
from .config_loader import ConfigLoader
from .engine import SuggestEngine
from .executables import PathExecutableCache
from .logging_setup import get_logger, init_logger
from .models import CompletionRequest, CompletionResult, ExitCode, ShellKind, TermsuggestError

__all__ = ["format_result", "main", "run_completion"]

USAGE = """Usage: termsuggest [--debug LOGFILE] [--config PATH] [--shell NAME] [--cwd DIR] [--cursor N] [--json] COMMAND_LINE

Prints one candidate per line (label, kind, detail), followed by path hints."""


def use_param(txt: str) -> str:
    """Check if parameter `txt` is in sys.argv.

    if found, removes it from sys.argv & returns the argument value
    """
    v = ""
    if txt in sys.argv:
        i = sys.argv.index(txt)
        if i + 1 < len(sys.argv):
            v = sys.argv[i + 1]
        del sys.argv[i : i + 2]
    return v


def use_flag(txt: str) -> bool:
    """Remove flag `txt` from sys.argv, returning True if it was present."""
    if txt in sys.argv:
        sys.argv.remove(txt)
        return True
    return False


def format_result(result: CompletionResult, as_json: bool = False, color: bool = False) -> str:
    """Render a completion result for the terminal."""
    if as_json:
        return json.dumps(result.to_dict(), indent=2)
    lines = []
    for candidate in result.candidates:
        kind = colorize(str(candidate.kind), *KindStyles.get(candidate.kind)) if color else str(candidate.kind)
        lines.append(f"{candidate.label}\t{kind}\t{candidate.detail}".rstrip())
    if result.files_requested:
        lines.append("# files")
    if result.folders_requested:
        lines.append("# folders")
    if result.resolved_cwd:
        lines.append(f"# cwd {result.resolved_cwd}")
    return "\n".join(lines)


async def run_completion(  # noqa: PLR0913
    config: Configuration,
    command_line: str,
    cursor: int,
    cwd: str,
    shell_kind: ShellKind | None,
    as_json: bool = False,
) -> None:
    """Complete `command_line` and print the result."""
    engine = SuggestEngine.from_config(config)
    path_cache = PathExecutableCache(get_logger("executables"), windows=engine.windows)
    try:
        env = dict(os.environ)
        executables = await path_cache.get_executables(env)
        request = CompletionRequest(command_line, cursor, executables, env, cwd, shell_kind)
        result = await engine.provide(request)
    finally:
        engine.dispose()
    print(format_result(result, as_json, color=should_colorize(sys.stdout)))


def main() -> None:
    """Run the command."""
    debug_flag = use_param("--debug")
    if debug_flag:
        init_logger(filename=debug_flag, force_debug=True)
    else:
        init_logger()
    log = get_logger("startup")

    config_override = use_param("--config")
    shell_name = use_param("--shell") or os.path.basename(os.environ.get("SHELL", ""))
    cwd = use_param("--cwd") or os.getcwd()
    cursor_param = use_param("--cursor")
    as_json = use_flag("--json")

    args = sys.argv[1:]
    if not args or args[0] in {"-h", "--help"}:
        print(USAGE)
        sys.exit(ExitCode.SUCCESS if args else ExitCode.USAGE_ERROR)

    command_line = " ".join(args)
    try:
        cursor = int(cursor_param) if cursor_param else len(command_line)
    except ValueError:
        log.critical("Invalid cursor position: %s", cursor_param)
        sys.exit(ExitCode.USAGE_ERROR)

    shell_kind = ShellKind.from_name(shell_name) if shell_name else None
    if shell_name and shell_kind is None:
        log.warning("Unknown shell %s, builtins will not be listed", shell_name)

    try:
        config = Configuration.from_config(ConfigLoader(log).load(config_override), log)
        asyncio.run(run_completion(config, command_line, cursor, cwd, shell_kind, as_json))
    except KeyboardInterrupt:
        pass
    except TermsuggestError:
        log.critical("Command failed.")
        sys.exit(ExitCode.CONFIG_ERROR)


if __name__ == "__main__":
    main()
