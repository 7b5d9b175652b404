# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
comproenv shell engine.

Owns:
- the current state (Scope) and env/task selection
- the per-scope command tables and user alias replay
- the settings hierarchy (task > environment > global)
- the history buffer
- persistence orchestration (load at start / reload, save, autosave)

Important boundary:
- The shell does not parse YAML itself; documents come through YAMLStore.
- Directory layout and child processes are injected collaborators.
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from . import config as cfg_module
from .aliases import alias_key, format_pairs, parse_pairs
from .config import ANSI_COLORS
from .document import Mapping
from .errors import (
    AliasError,
    CommandError,
    DocumentParseError,
    SettingNotFound,
)
from .history import HistoryBuffer
from .interfaces import ConfigModel, Executor
from .models import Environment, Task
from .registry import CommandRegistry, Scope
from .settings import Settings
from .settings import resolve as resolve_layers
from .store import (
    YAMLStore,
    parse_config_document,
    parse_environments_document,
)
from .utils import split_command
from .workspace import Workspace

logger = logging.getLogger(__name__)


def write_crash_log(
    error: Exception,
    state: str = "",
    raw_command: str = "",
) -> None:
    """Append an unhandled handler exception to crash.log.

    Only creates the log directory when actually needed.
    """
    try:
        log_dir = cfg_module.logs_dir(cfg_module.get_data_root())
        log_dir.mkdir(parents=True, exist_ok=True)

        lines = [
            f"{datetime.now().isoformat()}",
            f"state={state}",
        ]
        if raw_command:
            lines.append(f"raw={raw_command}")
        lines.append(f"error={type(error).__name__}: {error}")
        lines.append("traceback:")
        lines.append(
            "".join(
                traceback.format_exception(
                    type(error), error, error.__traceback__
                )
            )
        )
        lines.append("----")

        with (log_dir / "crash.log").open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
    except OSError:
        logger.exception("Unable to write crash log")


@dataclass
class Shell:
    """comproenv session engine."""

    store: YAMLStore
    workspace: Workspace
    executor: Executor
    config: ConfigModel

    registry: CommandRegistry = field(default_factory=CommandRegistry)
    global_settings: Settings = field(default_factory=Settings)
    envs: list[Environment] = field(default_factory=list)
    history: HistoryBuffer | None = None

    state: Scope = Scope.GLOBAL
    current_env: int = -1
    current_task: int = -1

    running: bool = False
    exit_code: int = 0

    output_fn: Callable[[str], None] = print

    def __post_init__(self) -> None:
        if self.history is None:
            self.history = HistoryBuffer(self.config.history_capacity)
        self.configure_commands()

    # -----------------------
    # Output
    # -----------------------

    def write(self, text: str) -> None:
        self.output_fn(text)

    # -----------------------
    # Selection helpers
    # -----------------------

    @property
    def env(self) -> Environment | None:
        if self.current_env == -1:
            return None
        return self.envs[self.current_env]

    @property
    def task(self) -> Task | None:
        env = self.env
        if env is None or self.current_task == -1:
            return None
        return env.tasks[self.current_task]

    def enter_global(self) -> None:
        self.state = Scope.GLOBAL
        self.current_env = -1
        self.current_task = -1

    def enter_environment(self, index: int) -> None:
        self.state = Scope.ENVIRONMENT
        self.current_env = index
        self.current_task = -1

    def enter_task(self, index: int) -> None:
        if self.current_env == -1:
            raise CommandError("No environment selected")
        self.state = Scope.TASK
        self.current_task = index

    def enter_generator(self) -> None:
        if self.current_task == -1:
            raise CommandError("No task selected")
        self.state = Scope.GENERATOR

    def stop(self, exit_code: int = 0) -> None:
        self.running = False
        self.exit_code = exit_code

    # -----------------------
    # Commands
    # -----------------------

    def configure_commands(self) -> None:
        """Reset every command table to the built-in commands."""
        from .commands import register_all

        self.registry.clear()
        register_all(self.registry)

    def alias_pairs(self, scope: Scope) -> list[tuple[str, str]]:
        return parse_pairs(self.global_settings.get(alias_key(scope), ""))

    def set_alias_pairs(
        self, scope: Scope, pairs: list[tuple[str, str]]
    ) -> None:
        self.global_settings[alias_key(scope)] = format_pairs(pairs)

    def configure_user_aliases(self) -> None:
        """Replay persisted ``alias_<state>`` pairs, left to right."""
        for scope in Scope:
            for new, target in self.alias_pairs(scope):
                try:
                    self.registry.alias(scope, target, scope, new)
                except AliasError as e:
                    logger.warning("Skipping stored alias %s: %s", new, e)

    def rebuild_commands(self) -> None:
        self.configure_commands()
        self.configure_user_aliases()

    # -----------------------
    # Settings
    # -----------------------

    def current_settings(self) -> Settings:
        """Settings owned by the current scope's entity."""
        if self.state in (Scope.TASK, Scope.GENERATOR):
            task = self.task
            assert task is not None
            return task.settings
        if self.state is Scope.ENVIRONMENT:
            env = self.env
            assert env is not None
            return env.settings
        return self.global_settings

    def layers(self) -> list[tuple[Scope, Settings]]:
        """Selected settings layers, narrowest first."""
        out: list[tuple[Scope, Settings]] = []
        if self.task is not None:
            out.append((Scope.TASK, self.task.settings))
        if self.env is not None:
            out.append((Scope.ENVIRONMENT, self.env.settings))
        out.append((Scope.GLOBAL, self.global_settings))
        return out

    def resolve(self, key: str) -> str:
        """Task, then environment, then global. Raises SettingNotFound."""
        return resolve_layers(key, (layer for _, layer in self.layers()))

    def autosave_enabled(self) -> bool:
        return self.global_settings.get("autosave") == "on"

    # -----------------------
    # Persistence
    # -----------------------

    def save(self) -> int:
        assert self.history is not None
        try:
            self.store.save(self.global_settings, self.history, self.envs)
        except OSError as e:
            logger.error("Save failed: %s", e)
            self.write(f"Unable to save settings: {e}")
            return 1
        return 0

    def autosave(self) -> int:
        """Save when autosave is on; the verdict of that save, else 0."""
        if self.autosave_enabled():
            return self.save()
        return 0

    def _read_documents(self, strict: bool) -> tuple[Mapping, Mapping]:
        """Read config and environments documents.

        A missing file is an empty document. With ``strict`` a malformed
        document raises DocumentParseError; otherwise it is reported and
        treated as empty.
        """
        docs: list[Mapping] = []
        for what, path, read in (
            ("Configuration", self.store.config_path, self.store.read_config),
            (
                "Environments",
                self.store.environments_path,
                self.store.read_environments,
            ),
        ):
            try:
                docs.append(read())
            except FileNotFoundError:
                if not strict:
                    self.write(
                        f"{what} file ({path}) does not exist. "
                        f"Creating new one."
                    )
                docs.append(Mapping({}))
            except DocumentParseError as e:
                if strict:
                    raise
                self._warn_malformed(path, e)
                docs.append(Mapping({}))
        return docs[0], docs[1]

    def _warn_malformed(self, path: Path, error: DocumentParseError) -> None:
        logger.warning("Unable to parse %s: %s", path, error)
        self.write(f"Warning: unable to parse {path}: {error}")

    def _parse_config(
        self, config: Mapping
    ) -> tuple[Settings, HistoryBuffer]:
        history = HistoryBuffer(self.config.history_capacity)
        return parse_config_document(config, history), history

    def _apply_documents(
        self,
        global_settings: Settings,
        history: HistoryBuffer,
        envs: list[Environment],
    ) -> None:
        """Replace in-memory state with already parsed documents."""
        for key, value in self.config.default_settings("global").items():
            global_settings.setdefault(key, value)

        self.global_settings = global_settings
        self.envs = envs
        self.history = history
        self.rebuild_commands()
        if not self.workspace.create_paths(self.envs):
            self.write("Warning: some environment directories are missing")
        self.enter_global()

    def load(self) -> None:
        """Lenient load used at startup.

        Each malformed document is reported and replaced by an empty one;
        the other document is kept.
        """
        config, envs_doc = self._read_documents(strict=False)
        try:
            global_settings, history = self._parse_config(config)
        except DocumentParseError as e:
            self._warn_malformed(self.store.config_path, e)
            global_settings, history = self._parse_config(Mapping({}))
        try:
            envs = parse_environments_document(envs_doc)
        except DocumentParseError as e:
            self._warn_malformed(self.store.environments_path, e)
            envs = []
        self._apply_documents(global_settings, history, envs)

    def reload_settings(self) -> None:
        """Strict reload; a malformed document leaves state unchanged."""
        try:
            config, envs_doc = self._read_documents(strict=True)
            global_settings, history = self._parse_config(config)
            envs = parse_environments_document(envs_doc)
        except DocumentParseError as e:
            raise CommandError(f"Unable to reload settings: {e}") from e
        self._apply_documents(global_settings, history, envs)

    # -----------------------
    # Session
    # -----------------------

    def start(self) -> None:
        """Load persisted state and start a session."""
        self.load()
        self.running = True
        self.exit_code = 0
        welcome = (self.config.system.get("welcome") or {}).get("message")
        if isinstance(welcome, str) and welcome.strip():
            self.write(welcome.strip())

    def prompt_path(self) -> str:
        parts = [self.config.prompt_marker]
        if self.env is not None:
            parts.append(f"/{self.env.name}")
        if self.task is not None:
            parts.append(f"/{self.task.name}")
        if self.state is Scope.GENERATOR:
            parts.append("/gen")
        return "".join(parts)

    def prompt(self) -> str:
        """Return the current prompt string with ANSI colors."""
        branding = self.config.branding
        reset = ANSI_COLORS["reset"]

        def paint(role: str, text: str) -> str:
            color = ANSI_COLORS.get(branding.get(role, ""), "")
            return f"{color}{text}{reset}" if color else text

        out = paint("marker_color", self.config.prompt_marker)
        if self.env is not None:
            out += "/" + paint("env_color", self.env.name)
        if self.task is not None:
            out += "/" + paint("task_color", self.task.name)
        if self.state is Scope.GENERATOR:
            out += "/" + paint("gen_color", "gen")
        return out

    def handle_line(self, line: str) -> int | None:
        """Dispatch one input line.

        Returns the handler verdict, or None for empty input, unknown
        commands and commands that failed with CommandError.
        """
        argv = split_command(line)
        if not argv:
            return None

        handler = self.registry.lookup(self.state, argv[0])
        if handler is None:
            self.write(f"Unknown command {argv[0]}")
            return None

        logger.debug("dispatch %s: %s", self.state.state_name, argv)
        verdict: int | None = None
        try:
            verdict = handler(self, argv)
            if verdict:
                self.write(f"Command {argv[0]} returned {verdict}")
        except (CommandError, SettingNotFound) as e:
            self.write(f"Error: {e}")
        finally:
            assert self.history is not None
            self.history.push(" ".join(argv))
        return verdict

    @classmethod
    def create(
        cls,
        config_path: Path,
        environments_path: Path,
        workspace_root: Path,
        executor: Executor,
        config: ConfigModel,
    ) -> Shell:
        """Wire the default YAMLStore and Workspace for ``config``."""
        ws_cfg = config.get_path("workspace", {}) or {}
        workspace = Workspace(
            workspace_root,
            env_prefix=ws_cfg.get("env_prefix", "env_"),
            task_prefix=ws_cfg.get("task_prefix", "task_"),
            tests_dir=ws_cfg.get("tests_dir", "tests"),
        )
        return cls(
            store=YAMLStore(config_path, environments_path),
            workspace=workspace,
            executor=executor,
            config=config,
        )
