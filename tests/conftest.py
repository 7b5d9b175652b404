# tests/conftest.py
"""
Shared fakes and fixtures.

The shell is wired with real YAMLStore/Workspace on tmp_path and a
FakeExecutor, so no test ever spawns a compiler or interpreter.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest

from comproenv.config import YAMLConfig
from comproenv.shell import Shell

SYSTEM = {
    "system": {
        "name": "comproenv",
        "prompt_marker": ">",
        "welcome": {"message": "welcome to comproenv"},
    },
    "history": {"capacity": 100},
    "documents": {
        "config": "config.yaml",
        "environments": "environments.yaml",
    },
    "workspace": {
        "env_prefix": "env_",
        "task_prefix": "task_",
        "tests_dir": "tests",
    },
    "defaults": {
        "global": {"autosave": "on", "python_interpreter": "python"},
    },
    "branding": {"marker_color": "cyan", "env_color": "pink"},
}


@dataclass(frozen=True)
class FakeTTYResult:
    exit_code: int


class FakeExecutor:
    """Records commands instead of running them.

    ``responder(command, input_text)`` decides captured results; by default
    every run succeeds with empty output.
    """

    def __init__(self) -> None:
        self.runs: list[tuple[str, str | None, str | None]] = []
        self.tty_runs: list[tuple[str, str | None]] = []
        self.tty_exit = 0
        self.responder: Callable[[str, str | None], tuple[int, str, str]] = (
            lambda command, input_text: (0, "", "")
        )

    def run(self, command, cwd=None, input_text=None):
        self.runs.append((command, cwd, input_text))
        code, out, err = self.responder(command, input_text)
        return (code, out, err, "2025-01-01T00:00:00", 1)

    def run_tty(self, command, cwd=None):
        self.tty_runs.append((command, cwd))
        return FakeTTYResult(self.tty_exit)


def make_shell(root: Path, outputs: list[str], system: dict | None = None) -> Shell:
    shell = Shell.create(
        root / "config.yaml",
        root / "environments.yaml",
        workspace_root=root / "ws",
        executor=FakeExecutor(),
        config=YAMLConfig(system or SYSTEM),
    )
    shell.output_fn = outputs.append
    return shell


def run_lines(shell: Shell, *lines: str) -> list[int | None]:
    return [shell.handle_line(line) for line in lines]


@pytest.fixture(autouse=True)
def data_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep crash logs and log files inside tmp_path."""
    home = tmp_path / "data"
    monkeypatch.setenv("COMPROENV_DATA_HOME", str(home))
    return home


@pytest.fixture
def outputs() -> list[str]:
    return []


@pytest.fixture
def shell(tmp_path: Path, outputs: list[str]) -> Shell:
    """Started shell with empty documents; startup output discarded."""
    sh = make_shell(tmp_path, outputs)
    sh.start()
    outputs.clear()
    return sh
