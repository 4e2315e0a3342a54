" generic fixtures "
from unittest.mock import MagicMock

import pytest

from termsuggest.models import CompletionKind, ExecutableEntry

from .testtools import make_process


def pytest_configure():
    "Runs once before all"
    from termsuggest.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


@pytest.fixture
def log():
    "A debug logger"
    from termsuggest.logging_setup import get_logger

    return get_logger("tests")


@pytest.fixture
def subprocess_exec_mock(mocker):
    "Mocks asyncio.create_subprocess_exec, returning a process printing nothing"
    mocked_exec = mocker.patch("asyncio.create_subprocess_exec", name="mocked_exec")
    mocked_process: MagicMock = make_process(b"")
    mocked_exec.return_value = mocked_process
    return mocked_exec, mocked_process


@pytest.fixture
def executables():
    "A small search path"
    return [
        ExecutableEntry("git", CompletionKind.METHOD, "/usr/bin/git"),
        ExecutableEntry("code", CompletionKind.METHOD, "/usr/bin/code"),
        ExecutableEntry("ls", CompletionKind.METHOD, "/usr/bin/ls"),
        ExecutableEntry("tool", CompletionKind.METHOD, "/usr/local/bin/tool"),
    ]
