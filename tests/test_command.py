import json
import sys

import pytest

from termsuggest import command
from termsuggest.models import CompletionCandidate, CompletionKind, CompletionResult, ExitCode

RESULT = CompletionResult(
    [
        CompletionCandidate("checkout", "", "Switch branches", 4, 4, CompletionKind.METHOD),
        CompletionCandidate("--force", "Force", None, 4, 4, CompletionKind.FLAG),
    ],
    files_requested=True,
    folders_requested=False,
    resolved_cwd="/repo",
)


def test_format_text():
    assert command.format_result(RESULT) == "checkout\tmethod\n--force\tflag\tForce\n# files\n# cwd /repo"


def test_format_color():
    text = command.format_result(RESULT, color=True)
    assert "\x1b[32;1mmethod\x1b[0m" in text
    assert "\x1b[33mflag\x1b[0m" in text


def test_format_json():
    data = json.loads(command.format_result(RESULT, as_json=True))
    assert data["filesRequested"] is True
    assert data["foldersRequested"] is False
    assert data["resolvedCwd"] == "/repo"
    assert data["candidates"][0] == {
        "label": "checkout",
        "detail": "",
        "documentation": "Switch branches",
        "replacementStart": 4,
        "replacementLength": 4,
        "kind": "method",
    }


@pytest.fixture
def cli_env(tmp_path, monkeypatch, mocker):
    "A search path holding `git`, a config file and no color"
    mocker.patch("termsuggest.command.init_logger")
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    git = bin_dir / "git"
    git.write_text("#!/bin/sh\n")
    git.chmod(0o755)
    config = tmp_path / "config.toml"
    config.write_text("[termsuggest]\nbuiltin_specs = true\n")
    monkeypatch.setenv("PATH", str(bin_dir))
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    return tmp_path, config


def run_main(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["termsuggest", *args])
    command.main()


def test_main(cli_env, monkeypatch, capsys):
    tmp_path, config = cli_env
    run_main(monkeypatch, "--config", str(config), "--cwd", str(tmp_path), "--shell", "nu", "git", "chec")
    out = capsys.readouterr().out.splitlines()
    assert "checkout\tmethod" in out
    assert "# files" not in out


def test_main_json(cli_env, monkeypatch, capsys):
    tmp_path, config = cli_env
    run_main(monkeypatch, "--config", str(config), "--cwd", str(tmp_path), "--shell", "nu", "--json", "--cursor", "2", "gi")
    data = json.loads(capsys.readouterr().out)
    assert [c["label"] for c in data["candidates"]] == ["git"]
    assert data["filesRequested"] and data["foldersRequested"]
    assert data["resolvedCwd"] == str(tmp_path)


def test_usage(cli_env, monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc:
        run_main(monkeypatch)
    assert exc.value.code == ExitCode.USAGE_ERROR
    assert capsys.readouterr().out.startswith("Usage:")

    with pytest.raises(SystemExit) as exc:
        run_main(monkeypatch, "--help")
    assert exc.value.code == ExitCode.SUCCESS


def test_invalid_cursor(cli_env, monkeypatch):
    _, config = cli_env
    with pytest.raises(SystemExit) as exc:
        run_main(monkeypatch, "--config", str(config), "--cursor", "end", "git")
    assert exc.value.code == ExitCode.USAGE_ERROR


def test_missing_config(cli_env, monkeypatch):
    tmp_path, _ = cli_env
    with pytest.raises(SystemExit) as exc:
        run_main(monkeypatch, "--config", str(tmp_path / "missing.toml"), "git")
    assert exc.value.code == ExitCode.CONFIG_ERROR
