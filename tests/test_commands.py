# tests/test_commands.py
"""
Environment, task and generator commands against a real workspace
directory and a FakeExecutor.
"""
from __future__ import annotations

from pathlib import Path

import pytest
from conftest import run_lines

from comproenv.registry import Scope
from comproenv.shell import Shell


@pytest.fixture
def in_env(shell: Shell, outputs: list[str]) -> Shell:
    run_lines(shell, "ce cf", "se cf")
    outputs.clear()
    return shell


@pytest.fixture
def in_task(in_env: Shell, outputs: list[str]) -> Shell:
    run_lines(in_env, "ct a cpp", "st a")
    outputs.clear()
    return in_env


def task_dir(tmp_path: Path, task: str = "a") -> Path:
    return tmp_path / "ws" / "env_cf" / f"task_{task}"


# ----------------------------------------------------------------
# Environment state
# ----------------------------------------------------------------


def test_create_task_with_language(in_env: Shell, tmp_path: Path, outputs):
    assert in_env.handle_line("ct a cpp") == 0

    assert (task_dir(tmp_path) / "a.cpp").exists()
    assert (task_dir(tmp_path) / "tests").is_dir()
    in_env.handle_line("lt")
    assert outputs == ["List of tasks in cf:\n|-> a: cpp"]


def test_create_task_uses_language_setting(in_env: Shell, tmp_path: Path):
    run_lines(in_env, "set language py", "ct b")

    assert in_env.env.tasks[0].language == "py"
    assert (task_dir(tmp_path, "b") / "b.py").exists()


def test_create_task_without_language(in_env: Shell, outputs: list[str]):
    in_env.handle_line("ct b")

    assert outputs == [
        "Error: No language given and no `language` setting found"
    ]
    assert in_env.env.tasks == []


def test_create_duplicate_task(in_env: Shell, outputs: list[str]):
    run_lines(in_env, "ct a cpp", "ct a py")
    assert outputs == ["Error: Task named a already exists"]


def test_create_task_from_template(in_env: Shell, tmp_path: Path):
    template = tmp_path / "template.cpp"
    template.write_text("int main() { return 0; }\n", encoding="utf-8")

    run_lines(in_env, f"set template_cpp {template}", "ct a cpp")

    assert (task_dir(tmp_path) / "a.cpp").read_text(encoding="utf-8") == (
        "int main() { return 0; }\n"
    )


def test_unreadable_template_warns(in_env: Shell, tmp_path: Path, outputs):
    run_lines(in_env, f"set template_cpp {tmp_path / 'missing.cpp'}")

    assert in_env.handle_line("ct a cpp") == 0
    assert outputs[0].startswith("Warning: template")
    assert (task_dir(tmp_path) / "a.cpp").read_text(encoding="utf-8") == ""


def test_select_and_remove_task(in_env: Shell, tmp_path: Path, outputs):
    run_lines(in_env, "ct a cpp", "st nope")
    assert outputs == ["Error: Incorrect task name"]

    assert in_env.handle_line("rt a") == 0
    assert in_env.env.tasks == []
    assert not task_dir(tmp_path).exists()


def test_select_task_prompt(in_task: Shell):
    assert in_task.state is Scope.TASK
    assert in_task.prompt_path() == ">/cf/a"

    in_task.handle_line("q")
    assert in_task.state is Scope.ENVIRONMENT
    assert in_task.current_task == -1


# ----------------------------------------------------------------
# Task state: compile + run
# ----------------------------------------------------------------


def test_compile_substitutes_placeholders(in_task: Shell, tmp_path, outputs):
    in_task.handle_line("set compiler_cpp g++ -O2 {src} -o {bin}")

    assert in_task.handle_line("compile") == 0
    assert in_task.executor.tty_runs == [
        ("g++ -O2 a.cpp -o a.exe", str(task_dir(tmp_path))),
    ]
    assert outputs == ["g++ -O2 a.cpp -o a.exe"]


def test_compile_setting_inherited_from_global(shell: Shell):
    run_lines(
        shell, "set compiler_cpp clang++ {src}", "ce cf", "se cf",
        "ct a cpp", "st a", "c",
    )
    assert shell.executor.tty_runs[-1][0] == "clang++ a.cpp"


def test_compile_failure_is_the_verdict(in_task: Shell, outputs: list[str]):
    in_task.handle_line("set compiler_cpp g++ {src}")
    in_task.executor.tty_exit = 1

    assert in_task.handle_line("c") == 1
    assert outputs[-1] == "Command c returned 1"


def test_compile_without_compiler(in_task: Shell, outputs: list[str]):
    in_task.handle_line("c")
    assert outputs == ["Error: No compiler configured for cpp"]


def test_compile_unknown_placeholder(in_task: Shell, outputs: list[str]):
    run_lines(in_task, "set compiler_cpp g++ {source}", "c")

    assert outputs[0].startswith("Error: Unknown placeholders: source")
    assert in_task.executor.tty_runs == []


def test_run_prefers_runner(in_task: Shell):
    run_lines(in_task, "set runner_cpp ./{bin} --fast", "set compiler_cpp g++")

    assert in_task.handle_line("run") == 0
    assert in_task.executor.tty_runs[-1][0] == "./a.exe --fast"


def test_run_falls_back_to_binary(in_task: Shell):
    run_lines(in_task, "set compiler_cpp g++ {src}", "r")
    assert in_task.executor.tty_runs[-1][0] == "./a.exe"


def test_run_without_runner_or_compiler(in_task: Shell, outputs: list[str]):
    in_task.handle_line("r")
    assert outputs == ["Error: No runner or compiler configured for cpp"]


# ----------------------------------------------------------------
# Task state: tests
# ----------------------------------------------------------------


def _write_test(tmp_path: Path, name: str, given: str, expected: str) -> None:
    tests = task_dir(tmp_path) / "tests"
    (tests / f"{name}.in").write_text(given, encoding="utf-8")
    (tests / f"{name}.out").write_text(expected, encoding="utf-8")


def _adder(command: str, input_text: str | None) -> tuple[int, str, str]:
    if input_text is None or not input_text.strip():
        return (1, "", "empty input")
    return (0, f"{sum(map(int, input_text.split()))}\n", "")


def test_task_tests_report_per_test(in_task: Shell, tmp_path, outputs):
    in_task.handle_line("set runner_cpp ./{bin}")
    _write_test(tmp_path, "1", "1 2\n", "3\n")
    _write_test(tmp_path, "2", "2 2\n", "5")
    _write_test(tmp_path, "3", "\n", "0\n")
    in_task.executor.responder = _adder
    outputs.clear()

    assert in_task.handle_line("t") == 2

    assert outputs[0].startswith("Test 1: OK")
    assert outputs[1].startswith("Test 2: WA")
    assert outputs[2].startswith("Test 3: RE")
    assert outputs[3] == "Passed 1/3"
    assert outputs[4] == "Command t returned 2"
    command, cwd, input_text = in_task.executor.runs[0]
    assert command == "./a.exe"
    assert cwd == str(task_dir(tmp_path))
    assert input_text == "1 2\n"


def test_task_tests_ignore_whitespace_layout(in_task: Shell, tmp_path):
    in_task.handle_line("set runner_cpp ./{bin}")
    _write_test(tmp_path, "1", "1 2", "  3  \n\n")
    in_task.executor.responder = _adder

    assert in_task.handle_line("test") == 0


def test_task_tests_without_tests(in_task: Shell, outputs: list[str]):
    in_task.handle_line("set runner_cpp ./{bin}")
    outputs.clear()

    assert in_task.handle_line("t") == 0
    assert outputs == ["No tests found"]


# ----------------------------------------------------------------
# Generator state
# ----------------------------------------------------------------


def test_generator_manages_test_pairs(in_task: Shell, tmp_path, outputs):
    in_task.handle_line("gen")
    assert in_task.state is Scope.GENERATOR
    assert in_task.prompt_path() == ">/cf/a/gen"

    run_lines(in_task, "ct 1", "ct 2", "ct 1")
    assert outputs == ["Error: Test named 1 already exists"]
    assert (task_dir(tmp_path) / "tests" / "2.out").exists()

    outputs.clear()
    in_task.handle_line("lt")
    assert outputs == ["List of tests in a:\n|-> 1\n|-> 2"]

    assert in_task.handle_line("rt 1") == 0
    assert not (task_dir(tmp_path) / "tests" / "1.in").exists()

    outputs.clear()
    in_task.handle_line("rt 1")
    assert outputs == ["Error: Incorrect test name"]


def test_generator_leaves_to_task(in_task: Shell):
    run_lines(in_task, "gen", "q")

    assert in_task.state is Scope.TASK
    assert in_task.task.name == "a"


def test_generator_has_shared_commands(in_task: Shell, outputs: list[str]):
    run_lines(in_task, "gen", "history")
    assert outputs[-1].startswith("Commands history:")
    outputs.clear()

    in_task.handle_line("set x y")
    assert outputs == ["Unknown command set"]


# ----------------------------------------------------------------
# Names that would escape the workspace
# ----------------------------------------------------------------


@pytest.mark.parametrize("name", ["a/../../precious", "..", ".", "a\\b"])
def test_create_environment_rejects_path_names(shell: Shell, outputs, name):
    shell.handle_line(f"ce {name}")

    assert outputs == [f"Error: Incorrect environment name: {name}"]
    assert shell.envs == []


def test_environment_name_cannot_reach_outside_workspace(
    shell: Shell, tmp_path: Path
):
    precious = tmp_path / "precious"
    precious.mkdir()
    (precious / "keep.txt").write_text("data", encoding="utf-8")

    run_lines(shell, "ce a/../../precious", "re a/../../precious")

    assert (precious / "keep.txt").exists()
    assert not (tmp_path / "ws" / "env_a").exists()


def test_create_task_rejects_path_names(in_env: Shell, outputs: list[str]):
    run_lines(in_env, "ct ../x cpp", "ct a ../../x")

    assert outputs == [
        "Error: Incorrect task name: ../x",
        "Error: Incorrect language name: ../../x",
    ]
    assert in_env.env.tasks == []


def test_create_test_rejects_path_names(in_task: Shell, outputs: list[str]):
    run_lines(in_task, "gen", "ct ../1")

    assert outputs == ["Error: Incorrect test name: ../1"]


# ----------------------------------------------------------------
# Undecodable bytes
# ----------------------------------------------------------------


def test_task_tests_tolerate_invalid_utf8(in_task: Shell, tmp_path: Path):
    in_task.handle_line("set runner_cpp ./{bin}")
    tests = task_dir(tmp_path) / "tests"
    (tests / "1.in").write_bytes(b"\xff 1\n")
    (tests / "1.out").write_bytes(b"\xfe\n")

    assert in_task.handle_line("t") == 1
    _command, _cwd, input_text = in_task.executor.runs[0]
    assert "�" in input_text
