"""Tests for candidate aggregation."""

import pytest

from termsuggest.aggregator import CandidateAggregator, CandidateList, matches_executable, remove_file_extension
from termsuggest.generators import GeneratorExecutor
from termsuggest.logging_setup import get_logger
from termsuggest.models import CompletionKind, ExecutableEntry, TokenType
from termsuggest.prefix import get_prefix
from termsuggest.specs.models import ArgSpec, CommandSpec, OptionSpec, ScriptGenerator, Suggestion, Template, TemplateGenerator
from termsuggest.specs.postprocess import lines
from termsuggest.tokens import get_command, get_token_type

from .testtools import CancelAfter, outputs_by_command

TOOL = CommandSpec(
    name=("tool",),
    description="A tool",
    subcommands=(CommandSpec(("run",), "Run it"), CommandSpec(("list",))),
    options=(OptionSpec(("-v", "--verbose"), "Be verbose"),),
    args=(ArgSpec("mode", suggestions=(Suggestion("fast", "Go fast"), Suggestion(("slow", "careful")))),),
)
GIT = CommandSpec(("git",), "The stupid content tracker", subcommands=(CommandSpec(("checkout",)),))
CODE = CommandSpec(("code",), "Visual Studio Code")


async def collect(line, specs=(TOOL, GIT, CODE), executables=None, *, cursor=None, strip=False, cwd="/repo", cancellation=None):
    log = get_logger("tests")
    cursor = len(line) if cursor is None else cursor
    if executables is None:
        executables = [
            ExecutableEntry("git", CompletionKind.METHOD, "/usr/bin/git"),
            ExecutableEntry("code", CompletionKind.METHOD, "/usr/bin/code"),
            ExecutableEntry("ls", CompletionKind.METHOD, "/usr/bin/ls"),
            ExecutableEntry("tool", CompletionKind.METHOD, "/usr/local/bin/tool"),
        ]
    aggregator = CandidateAggregator(log, GeneratorExecutor(log, timeout=1.0), strip_extensions=strip)
    command = get_command(line, cursor, escapes=not strip) if cwd else None
    return await aggregator.collect(
        specs,
        line,
        cursor,
        get_prefix(line, cursor),
        executables,
        get_token_type(line, cursor),
        command,
        cwd,
        cancellation,
    )


def labels(aggregation):
    return [c.label for c in aggregation.candidates.items]


@pytest.mark.parametrize(
    ("spec_label", "executable", "strip", "expected"),
    [
        ("code", "code.cmd", True, True),
        ("code", "code.exe", True, True),
        ("code", "code", True, True),
        ("code", "code-insiders.cmd", True, False),
        ("code", "vscode.exe", True, False),
        ("code", "code", False, True),
        ("code", "code-insiders", False, True),
        ("code", "vscode", False, False),
    ],
)
def test_matches_executable(spec_label, executable, strip, expected):
    assert matches_executable(spec_label, executable, strip) is expected


def test_remove_file_extension():
    assert remove_file_extension("code.cmd") == "code"
    assert remove_file_extension("a.b.exe") == "a.b"
    assert remove_file_extension(".bashrc") == ".bashrc"
    assert remove_file_extension("git") == "git"


def test_candidate_list_first_writer_wins():
    candidates = CandidateList(9, "chec")
    assert candidates.add("checkout", kind=CompletionKind.METHOD)
    assert not candidates.add("checkout", kind=CompletionKind.ARGUMENT)
    (item,) = candidates.items
    assert item.kind == CompletionKind.METHOD
    assert (item.replacement_start, item.replacement_length) == (5, 4)


@pytest.mark.asyncio
async def test_command_position():
    result = await collect("g")
    assert labels(result) == ["tool", "git", "code", "ls"]
    git = result.candidates.items[1]
    assert git.detail == "The stupid content tracker"
    assert git.documentation == "/usr/bin/git"
    assert git.kind == CompletionKind.METHOD
    ls = result.candidates.items[3]
    assert ls.detail == "/usr/bin/ls"
    assert ls.documentation is None
    assert result.files_requested and result.folders_requested


@pytest.mark.asyncio
async def test_command_position_without_matching_spec():
    executables = [ExecutableEntry("ls", detail="/bin/ls"), ExecutableEntry("cat", detail="/bin/cat")]
    result = await collect("", executables=executables)
    assert labels(result) == ["ls", "cat"]
    assert result.files_requested and result.folders_requested


@pytest.mark.asyncio
async def test_alias_is_not_a_spec_command_candidate():
    executables = [ExecutableEntry("git", CompletionKind.ALIAS, "hub", "hub")]
    result = await collect("gi", specs=(GIT,), executables=executables)
    (candidate,) = result.candidates.items
    assert candidate.label == "git"
    assert candidate.kind == CompletionKind.ALIAS
    assert candidate.detail == "hub"


@pytest.mark.asyncio
async def test_extension_stripping_in_command_position():
    executables = [ExecutableEntry("code.cmd"), ExecutableEntry("code-insiders.cmd")]
    result = await collect("co", specs=(CODE,), executables=executables, strip=True)
    assert labels(result) == ["code", "code.cmd", "code-insiders.cmd"]


@pytest.mark.asyncio
async def test_category_order():
    result = await collect("tool ")
    assert labels(result) == ["fast", "slow", "careful", "run", "list", "-v", "--verbose"]
    kinds = [c.kind for c in result.candidates.items]
    assert kinds == [CompletionKind.ARGUMENT] * 3 + [CompletionKind.METHOD] * 2 + [CompletionKind.FLAG] * 2
    fast = result.candidates.items[0]
    assert fast.documentation == "Go fast"
    assert not result.files_requested and not result.folders_requested


@pytest.mark.asyncio
async def test_replacement_range_of_spec_candidates():
    result = await collect("tool ru")
    assert all((c.replacement_start, c.replacement_length) == (5, 2) for c in result.candidates.items)


@pytest.mark.asyncio
async def test_dedup_across_categories_and_generators(mocker):
    mocker.patch(
        "asyncio.create_subprocess_exec",
        side_effect=outputs_by_command({"first": b"run\nalpha\n", "second": b"alpha\nbeta\n"}),
    )
    spec = CommandSpec(
        ("tool",),
        subcommands=(CommandSpec(("run",)),),
        args=(
            ArgSpec(
                "x",
                generators=(ScriptGenerator("first", (), lines), ScriptGenerator("second", (), lines)),
                suggestions=(Suggestion("beta"), Suggestion("gamma")),
            ),
        ),
    )
    result = await collect("tool ", specs=(spec,))
    assert labels(result) == ["run", "alpha", "beta", "gamma"]
    assert result.candidates.items[0].kind == CompletionKind.ARGUMENT


@pytest.mark.asyncio
async def test_template_generator_requests_files():
    spec = CommandSpec(("tool",), args=(ArgSpec("file", generators=(TemplateGenerator(Template.FILEPATHS),)),))
    result = await collect("tool ", specs=(spec,))
    assert labels(result) == []
    assert result.files_requested
    assert not result.folders_requested


@pytest.mark.asyncio
async def test_current_argument_without_suggestions_prevents_path_fallback():
    spec = CommandSpec(("tool",), args=(ArgSpec("text"),))
    result = await collect("tool ", specs=(spec,))
    assert labels(result) == []
    assert result.has_current_arg
    assert not result.files_requested and not result.folders_requested


@pytest.mark.asyncio
async def test_unknown_command_falls_back_to_paths():
    result = await collect("ls -")
    assert labels(result) == []
    assert result.files_requested and result.folders_requested


@pytest.mark.asyncio
async def test_spec_requires_exact_command_word():
    executables = [ExecutableEntry("tools"), ExecutableEntry("tool")]
    result = await collect("tools ", executables=executables)
    assert labels(result) == []
    assert result.files_requested and result.folders_requested


@pytest.mark.asyncio
async def test_alias_resolves_to_its_definition():
    executables = [ExecutableEntry("tool"), ExecutableEntry("t", CompletionKind.ALIAS, "tool -v", "tool")]
    result = await collect("t ", specs=(TOOL,), executables=executables)
    assert "run" in labels(result)


@pytest.mark.asyncio
async def test_extension_stripping_in_later_position():
    executables = [ExecutableEntry("tool.exe")]
    for line in ("tool.exe ", "tool "):
        result = await collect(line, specs=(TOOL,), executables=executables, strip=True)
        assert "run" in labels(result), line


@pytest.mark.asyncio
async def test_missing_tokens_skip_specs():
    result = await collect("tool ", cwd=None)
    assert labels(result) == []
    assert result.files_requested and result.folders_requested


@pytest.mark.asyncio
async def test_spec_without_labels_is_skipped():
    result = await collect("", specs=(CommandSpec(()),), executables=[ExecutableEntry("ls")])
    assert labels(result) == ["ls"]


@pytest.mark.asyncio
async def test_cancellation_after_first_spec():
    specs = (
        CommandSpec(("git",), "first"),
        CommandSpec(("code",), "second"),
        CommandSpec(("ls",), "third"),
    )
    result = await collect("", specs=specs, cancellation=CancelAfter(1))
    assert result.cancelled
    assert labels(result) == ["git"]
    assert not result.files_requested and not result.folders_requested


@pytest.mark.asyncio
async def test_generated_strings_document_themselves(mocker):
    mocker.patch("asyncio.create_subprocess_exec", side_effect=outputs_by_command({"list-envs": b"staging prod"}))
    generator = ScriptGenerator("list-envs", (), lambda output, _tokens: output.split())
    spec = CommandSpec(("tool",), args=(ArgSpec("env", generators=(generator,)),))
    result = await collect("tool ", specs=(spec,))
    assert [(c.label, c.documentation) for c in result.candidates.items] == [("staging", "staging"), ("prod", "prod")]
