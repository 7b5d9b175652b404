# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.shortcuts import print_formatted_text
from prompt_toolkit.styles import Style

from .registry import Scope

if TYPE_CHECKING:
    from .shell import Shell  # pragma: no cover


# ----------------------------
# Theme / Style
# ----------------------------


def _default_style_dict() -> dict[str, str]:
    return {
        "completion-menu": "bg:#111111 #d0d0d0",
        "completion-menu.completion": "bg:#111111 #d0d0d0",
        "completion-menu.completion.current": "bg:#303030 #ffffff bold",
        "completion-menu.meta.completion": "bg:#111111 #808080",
        "completion-menu.meta.completion.current": "bg:#303030 #a0a0a0",
        "bottom-toolbar": "bg:#0b0b0b #d0d0d0",
        "comproenv.statebar": "bg:#0b0b0b #a0a0a0",
        "comproenv.statebar.value": "bg:#0b0b0b #d0d0d0 bold",
    }


def _build_style(shell: Shell | None) -> Style:
    base = _default_style_dict()
    if shell is not None:
        overrides = shell.config.get_path("ui.style", {}) or {}
        for k, v in overrides.items():
            if isinstance(k, str) and isinstance(v, str):
                base[k] = v
    return Style.from_dict(base)


# ----------------------------
# Completion
# ----------------------------


# (scope, command) pairs whose single argument names an existing entity.
ENV_ARG_COMMANDS = {(Scope.GLOBAL, "se"), (Scope.GLOBAL, "re")}
TASK_ARG_COMMANDS = {(Scope.ENVIRONMENT, "st"), (Scope.ENVIRONMENT, "rt")}
TEST_ARG_COMMANDS = {(Scope.GENERATOR, "rt")}


class CommandCompleter(Completer):
    """Command names of the current scope, then entity names as arguments."""

    def __init__(self, shell: Shell) -> None:
        self.shell = shell

    def _argument_candidates(self, command: str) -> list[str]:
        shell = self.shell
        key = (shell.state, command)
        if key in ENV_ARG_COMMANDS:
            return [env.name for env in shell.envs]
        if key in TASK_ARG_COMMANDS and shell.env is not None:
            return [task.name for task in shell.env.tasks]
        if key in TEST_ARG_COMMANDS and shell.task is not None:
            assert shell.env is not None
            return shell.workspace.list_tests(shell.env.name, shell.task.name)
        return []

    def get_completions(
        self, document, complete_event
    ) -> Iterable[Completion]:
        before = (document.text_before_cursor or "").lstrip()
        parts = before.split()

        # First token: command names with their help description.
        if not parts or (len(parts) == 1 and not before.endswith(" ")):
            token = parts[0] if parts else ""
            registry = self.shell.registry
            for name in registry.names(self.shell.state):
                if name.startswith(token):
                    yield Completion(
                        name,
                        start_position=-len(token),
                        display_meta=registry.description_of(
                            self.shell.state, name
                        ) or "",
                    )
            return

        # Second token only; every completable command takes one argument.
        if len(parts) > 2 or (len(parts) == 2 and before.endswith(" ")):
            return
        token = parts[1] if len(parts) == 2 else ""
        for name in self._argument_candidates(parts[0]):
            if name.startswith(token):
                yield Completion(name, start_position=-len(token))


# ----------------------------
# PromptSession UI
# ----------------------------


class PromptToolkitUI:
    """
    Terminal-friendly line reader:
      - Keeps normal terminal scrollback.
      - Completes command names and environment/task/test names.
      - Bottom toolbar shows the current state and autosave mode.
      - Ctrl+L clears the screen.
    """

    def __init__(self, shell: Shell | None = None) -> None:
        self.shell = shell
        self.session: PromptSession[str] | None = None
        self._style = _build_style(shell)

    def _bottom_toolbar(self):
        shell = self.shell
        if shell is None:
            return ""
        autosave = shell.global_settings.get("autosave", "?")
        return [
            ("class:comproenv.statebar", " state: "),
            ("class:comproenv.statebar.value", shell.state.state_name),
            ("class:comproenv.statebar", "  autosave: "),
            ("class:comproenv.statebar.value", autosave),
            ("class:comproenv.statebar", " "),
        ]

    def _ensure_session(self) -> None:
        if self.session is not None:
            return
        self.session = PromptSession(
            key_bindings=self.build_key_bindings(),
            completer=CommandCompleter(self.shell) if self.shell else None,
            complete_while_typing=False,
            style=self._style,
            bottom_toolbar=self._bottom_toolbar,
        )

    # ---------- public API ----------

    def read(self, prompt: str) -> str:
        """Raises EOFError on Ctrl+D and KeyboardInterrupt on Ctrl+C."""
        self._ensure_session()
        assert self.session is not None
        with patch_stdout():
            # prompt carries ANSI colours from Shell.prompt()
            return self.session.prompt(ANSI(prompt + " "))

    def write(self, text: str) -> None:
        """Print ``text`` followed by a newline."""
        print_formatted_text(ANSI(text), style=self._style)

    # ---------- keybindings ----------

    def build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("c-l")
        def _(event):
            event.app.renderer.clear()
            event.app.invalidate()

        return kb
