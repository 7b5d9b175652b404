# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
On-disk layout of environments and tasks.

    <root>/<env_prefix><env>/<task_prefix><task>/<task>.<language>
    <root>/<env_prefix><env>/<task_prefix><task>/tests/<test>.in|.out

Filesystem failures are reported as False return values and logged; the
command layer turns them into non-zero verdicts.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .models import Environment, Task

logger = logging.getLogger(__name__)

# Extensions that never name a task's source language.
NON_SOURCE_EXTENSIONS = frozenset({"in", "out", "exe"})


class Workspace:
    """Directory tree rooted at ``root``."""

    def __init__(
        self,
        root: Path,
        env_prefix: str = "env_",
        task_prefix: str = "task_",
        tests_dir: str = "tests",
    ) -> None:
        self.root = Path(root)
        self.env_prefix = env_prefix
        self.task_prefix = task_prefix
        self.tests_dir = tests_dir

    # -----------------------
    # Paths
    # -----------------------

    def env_path(self, env: str) -> Path:
        return self.root / f"{self.env_prefix}{env}"

    def task_path(self, env: str, task: str) -> Path:
        return self.env_path(env) / f"{self.task_prefix}{task}"

    def source_path(self, env: str, task: str, language: str) -> Path:
        return self.task_path(env, task) / f"{task}.{language}"

    def tests_path(self, env: str, task: str) -> Path:
        return self.task_path(env, task) / self.tests_dir

    # -----------------------
    # Environments / tasks
    # -----------------------

    def create_env(self, env: str) -> bool:
        path = self.env_path(env)
        if not self.contains(path):
            logger.error("Refusing to create %s outside %s", path, self.root)
            return False
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Unable to create environment directory: %s", e)
            return False
        return True

    def remove_env(self, env: str) -> bool:
        return self._remove_tree(self.env_path(env))

    def create_task(
        self, env: str, task: str, language: str, template: str = ""
    ) -> bool:
        """Create task directory, source stub and tests directory.

        An existing source file is never overwritten, and no stub is written
        without a language.
        """
        if not self.contains(self.task_path(env, task)):
            logger.error(
                "Refusing to create task %s outside %s", task, self.root
            )
            return False
        try:
            self.tests_path(env, task).mkdir(parents=True, exist_ok=True)
            source = self.source_path(env, task, language)
            if language and not source.exists():
                source.write_text(template, encoding="utf-8")
        except OSError as e:
            logger.error("Unable to create task directory: %s", e)
            return False
        return True

    def remove_task(self, env: str, task: str) -> bool:
        return self._remove_tree(self.task_path(env, task))

    def contains(self, path: Path) -> bool:
        """True when ``path`` lies strictly below the workspace root."""
        root = self.root.resolve()
        resolved = path.resolve()
        return resolved != root and resolved.is_relative_to(root)

    def _remove_tree(self, path: Path) -> bool:
        """True when ``path`` is gone afterwards.

        Paths outside the workspace root are never removed.
        """
        if not self.contains(path):
            logger.error("Refusing to remove %s outside %s", path, self.root)
            return False
        if not path.exists():
            return True
        try:
            shutil.rmtree(path)
        except OSError as e:
            logger.error("Unable to remove %s: %s", path, e)
        return not path.exists()

    def create_paths(self, envs: list[Environment]) -> bool:
        """Make sure every known environment and task exists on disk."""
        ok = True
        for env in envs:
            ok = self.create_env(env.name) and ok
            for task in env.tasks:
                ok = self.create_task(env.name, task.name, task.language) and ok
        return ok

    def scan(self) -> list[Environment]:
        """Rebuild environments and tasks from the directory tree.

        A task's language is the extension of its first source-looking file.
        """
        envs: list[Environment] = []
        if not self.root.is_dir():
            return envs
        for env_dir in sorted(self.root.iterdir()):
            if not env_dir.is_dir() or not env_dir.name.startswith(
                self.env_prefix
            ):
                continue
            env = Environment(env_dir.name[len(self.env_prefix):])
            for task_dir in sorted(env_dir.iterdir()):
                if not task_dir.is_dir() or not task_dir.name.startswith(
                    self.task_prefix
                ):
                    continue
                task = Task(task_dir.name[len(self.task_prefix):])
                for entry in sorted(task_dir.iterdir()):
                    lang = entry.suffix[1:]
                    if (entry.is_file() and lang and
                            lang not in NON_SOURCE_EXTENSIONS):
                        task.settings["language"] = lang
                        break
                env.add_task(task)
            envs.append(env)
        return envs

    # -----------------------
    # Tests (generator mode)
    # -----------------------

    def list_tests(self, env: str, task: str) -> list[str]:
        tests = self.tests_path(env, task)
        if not tests.is_dir():
            return []
        return sorted(p.stem for p in tests.glob("*.in"))

    def create_test(self, env: str, task: str, test: str) -> bool:
        tests = self.tests_path(env, task)
        try:
            tests.mkdir(parents=True, exist_ok=True)
            for ext in ("in", "out"):
                (tests / f"{test}.{ext}").touch(exist_ok=True)
        except OSError as e:
            logger.error("Unable to create test %s: %s", test, e)
            return False
        return True

    def remove_test(self, env: str, task: str, test: str) -> bool:
        tests = self.tests_path(env, task)
        ok = True
        for ext in ("in", "out"):
            path = tests / f"{test}.{ext}"
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.error("Unable to remove %s: %s", path, e)
                ok = False
        return ok
