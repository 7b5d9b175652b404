# tests/test_workspace.py
from __future__ import annotations

from pathlib import Path

import pytest

from comproenv.models import Environment, Task
from comproenv.settings import Settings
from comproenv.workspace import Workspace


@pytest.fixture
def ws(tmp_path: Path) -> Workspace:
    return Workspace(tmp_path / "ws")


def test_paths_follow_prefix_layout(ws: Workspace):
    assert ws.env_path("cf") == ws.root / "env_cf"
    assert ws.task_path("cf", "a") == ws.root / "env_cf" / "task_a"
    assert ws.source_path("cf", "a", "cpp").name == "a.cpp"
    assert ws.tests_path("cf", "a") == ws.root / "env_cf" / "task_a" / "tests"


def test_custom_prefixes(tmp_path: Path):
    ws = Workspace(tmp_path, env_prefix="e-", task_prefix="t-", tests_dir="cases")
    assert ws.tests_path("x", "y") == tmp_path / "e-x" / "t-y" / "cases"


def test_create_task_writes_template_once(ws: Workspace):
    assert ws.create_task("cf", "a", "cpp", "int main() {}\n")
    source = ws.source_path("cf", "a", "cpp")
    assert source.read_text(encoding="utf-8") == "int main() {}\n"
    assert ws.tests_path("cf", "a").is_dir()

    source.write_text("solved", encoding="utf-8")
    assert ws.create_task("cf", "a", "cpp", "template again")
    assert source.read_text(encoding="utf-8") == "solved"


def test_remove_env_and_task(ws: Workspace):
    ws.create_task("cf", "a", "py")

    assert ws.remove_task("cf", "a")
    assert not ws.task_path("cf", "a").exists()
    assert ws.remove_env("cf")
    assert not ws.env_path("cf").exists()
    # already gone counts as removed
    assert ws.remove_env("cf")


def test_create_paths_for_loaded_environments(ws: Workspace):
    env = Environment("cf")
    env.add_task(Task("a", Settings([("language", "cpp")])))

    assert ws.create_paths([env])
    assert ws.source_path("cf", "a", "cpp").exists()


def test_scan_rebuilds_environments(ws: Workspace):
    ws.create_task("cf", "a", "cpp")
    ws.create_task("cf", "b", "py")
    ws.create_env("atcoder")
    (ws.task_path("cf", "a") / "a.exe").write_text("", encoding="utf-8")
    (ws.root / "stray.txt").parent.mkdir(parents=True, exist_ok=True)
    (ws.root / "stray.txt").write_text("", encoding="utf-8")
    (ws.root / "not_an_env").mkdir()

    envs = ws.scan()

    assert [e.name for e in envs] == ["atcoder", "cf"]
    assert [(t.name, t.language) for t in envs[1].tasks] == [
        ("a", "cpp"), ("b", "py"),
    ]


def test_scan_of_missing_root_is_empty(ws: Workspace):
    assert ws.scan() == []


def test_tests_management(ws: Workspace):
    ws.create_task("cf", "a", "cpp")

    assert ws.list_tests("cf", "a") == []
    assert ws.create_test("cf", "a", "2")
    assert ws.create_test("cf", "a", "1")
    assert ws.list_tests("cf", "a") == ["1", "2"]
    assert (ws.tests_path("cf", "a") / "1.out").exists()

    assert ws.remove_test("cf", "a", "1")
    assert ws.list_tests("cf", "a") == ["2"]
    assert not (ws.tests_path("cf", "a") / "1.out").exists()


def test_create_paths_without_language_writes_no_stub(ws: Workspace):
    env = Environment("cf")
    env.add_task(Task("a"))

    assert ws.create_paths([env])
    assert list(ws.task_path("cf", "a").iterdir()) == [ws.tests_path("cf", "a")]


# ----------------------------------------------------------------
# Workspace boundary
# ----------------------------------------------------------------


def test_remove_never_leaves_the_workspace(ws: Workspace, tmp_path: Path):
    precious = tmp_path / "precious"
    precious.mkdir()
    ws.root.mkdir()

    assert not ws.remove_env("a/../../precious")
    assert precious.is_dir()
    # the root itself is not removable either
    assert not ws.remove_env("a/..")
    assert ws.root.is_dir()


def test_create_never_leaves_the_workspace(ws: Workspace, tmp_path: Path):
    assert not ws.create_env("a/../../outside")
    assert not ws.create_task("a/../..", "t", "cpp")
    assert not (tmp_path / "outside").exists()
    assert not (tmp_path / "task_t").exists()


def test_contains(ws: Workspace, tmp_path: Path):
    assert ws.contains(ws.env_path("cf"))
    assert not ws.contains(ws.root)
    assert not ws.contains(tmp_path / "elsewhere")
