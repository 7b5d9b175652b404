# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Global-state commands.

Several of them (save, history, alias, help, ...) are aliased into the other
states so they behave the same everywhere.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..aliases import remove_alias_chain
from ..errors import CommandError
from ..models import Environment, find_environment
from ..registry import CommandRegistry, Scope
from .common import (
    removal_verdict,
    require_args,
    require_plain_name,
    require_range,
)

if TYPE_CHECKING:
    from ..shell import Shell  # pragma: no cover

# Tasks shown per environment by `le` before "(and N more...)".
LIST_TASKS_PREVIEW = 3


# -----------------------
# Environments
# -----------------------


def cmd_select_env(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 1)
    index = find_environment(shell.envs, argv[1])
    if index == -1:
        raise CommandError("Incorrect environment name")
    shell.enter_environment(index)
    return 0


def cmd_create_env(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 1)
    name = argv[1]
    require_plain_name("environment", name)
    if find_environment(shell.envs, name) != -1:
        raise CommandError(f"Environment named {name} already exists")
    shell.envs.append(Environment(name))
    if not shell.workspace.create_env(name):
        shell.write(f"Unable to create directory for environment {name}")
        shell.autosave()
        return 1
    return shell.autosave()


def cmd_remove_env(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 1)
    name = argv[1]
    index = find_environment(shell.envs, name)
    if index == -1:
        raise CommandError("Incorrect environment name")
    del shell.envs[index]
    if shell.current_env == index:
        shell.enter_global()
    elif shell.current_env > index:
        shell.current_env -= 1
    save_verdict = shell.autosave()
    removed = shell.workspace.remove_env(name)
    verdict = removal_verdict(
        shell, "Environment", name, removed, shell.workspace.env_path(name)
    )
    return verdict or save_verdict


def cmd_list_envs(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    lines = ["List of environments in global:"]
    for env in shell.envs:
        lines.append(f"|-> {env.name}")
        for task in env.tasks[:LIST_TASKS_PREVIEW]:
            lines.append(f"    |-> {task.name}: {task.language}")
        if len(env.tasks) > LIST_TASKS_PREVIEW:
            lines.append(
                f"    (and {len(env.tasks) - LIST_TASKS_PREVIEW} more...)"
            )
    shell.write("\n".join(lines))
    return 0


def cmd_reload_envs(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    shell.envs = shell.workspace.scan()
    shell.enter_global()
    shell.write(f"Loaded {len(shell.envs)} environments from disk")
    return 0


# -----------------------
# Settings + persistence
# -----------------------


def cmd_save(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    return shell.save()


def cmd_reload_settings(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    shell.reload_settings()
    return 0


def cmd_set(shell: Shell, argv: list[str]) -> int:
    """set <key> removes the key, set <key> <value...> stores it."""
    require_range(argv, 1)
    settings = shell.current_settings()
    key = argv[1]
    if len(argv) == 2:
        settings.pop(key, None)
    else:
        settings[key] = " ".join(argv[2:])
    return shell.autosave()


def cmd_show_settings(shell: Shell, argv: list[str]) -> int:
    """sets [key]: every selected layer, or where one key resolves from."""
    require_range(argv, 0, 1)
    if len(argv) == 2:
        key = argv[1]
        for scope, layer in shell.layers():
            if key in layer:
                shell.write(
                    f"\"{key}\" : \"{layer[key]}\" (from {scope.state_name})"
                )
                return 0
        raise CommandError(f"No setting with name: {key}")

    lines: list[str] = []
    for scope, layer in reversed(shell.layers()):
        if not len(layer):
            continue
        lines.append(f"Settings in {scope.state_name}:")
        for key, value in layer.items():
            lines.append(f"    \"{key}\" : \"{value}\"")
    if lines:
        shell.write("\n".join(lines))
    return 0


def cmd_autosave(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    current = shell.global_settings.get("autosave", "on")
    if current == "on":
        new = "off"
    elif current == "off":
        new = "on"
    else:
        raise CommandError("Unknown state for autosave")
    shell.global_settings["autosave"] = new
    shell.write(f"Set autosave to {new}")
    return 0


# -----------------------
# History + processes
# -----------------------


def cmd_history(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    assert shell.history is not None
    shell.write("\n".join(["Commands history:", *shell.history.get_all()]))
    return 0


def cmd_py_shell(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    interpreter = shell.resolve("python_interpreter")
    return shell.executor.run_tty(interpreter).exit_code


# -----------------------
# Aliases
# -----------------------


def cmd_alias(shell: Shell, argv: list[str]) -> int:
    """alias <new> <existing> in the current state, persisted globally."""
    require_args(argv, 2)
    new, existing = argv[1], argv[2]
    shell.registry.alias(shell.state, existing, shell.state, new)
    pairs = shell.alias_pairs(shell.state)
    pairs.append((new, existing))
    shell.set_alias_pairs(shell.state, pairs)
    return shell.autosave()


def cmd_delete_alias(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 1)
    state_name = shell.state.state_name
    pairs = shell.alias_pairs(shell.state)
    if not pairs:
        raise CommandError(f"Aliases in state {state_name} are not found")
    remaining, removed = remove_alias_chain(pairs, argv[1])
    if not removed:
        raise CommandError(f"No alias {argv[1]} in state {state_name}")
    shell.set_alias_pairs(shell.state, remaining)
    shell.rebuild_commands()
    shell.write(
        "Deleted aliases: " + ", ".join(new for new, _target in removed)
    )
    return shell.autosave()


# -----------------------
# Help + exit
# -----------------------


def cmd_help(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    groups = shell.registry.help_groups(shell.state)
    name_width = max(
        (len(name) for _desc, names in groups for name in names), default=0
    )
    desc_width = max((len(desc) for desc, _names in groups), default=0)
    separator = "-" * (name_width + 1) + "|" + "-" * (desc_width + 1)

    lines = ["Help:", separator]
    for desc, names in groups:
        for i, name in enumerate(names):
            row = f"{name.rjust(name_width)} |"
            lines.append(f"{row} {desc}" if i == 0 else row)
        lines.append(separator)
    shell.write("\n".join(lines))
    return 0


def cmd_quit(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    shell.write("Exiting...")
    verdict = shell.autosave()
    shell.stop(verdict)
    return verdict


# Commands available in every state.
SHARED = (
    "s", "py-shell", "autosave", "history", "reload-settings",
    "reload-envs", "alias", "delete-alias", "help", "?",
)


def register(registry: CommandRegistry) -> None:
    g = Scope.GLOBAL
    registry.register(g, "se", "Set environment", cmd_select_env)
    registry.register(g, "ce", "Create environment", cmd_create_env)
    registry.register(g, "re", "Remove environment", cmd_remove_env)
    registry.register(g, "le", "List of environments", cmd_list_envs)
    registry.register(g, "s", "Save settings", cmd_save)
    registry.register(g, "py-shell", "Launch Python shell", cmd_py_shell)
    registry.register(g, "autosave", "Toggle autosave", cmd_autosave)
    registry.register(g, "history", "Show commands history", cmd_history)
    registry.register(
        g, "reload-settings", "Hot reload settings from config file",
        cmd_reload_settings,
    )
    registry.register(
        g, "reload-envs",
        "Reload all environments and tasks from the workspace directory",
        cmd_reload_envs,
    )
    registry.register(g, "set", "Configure settings", cmd_set)
    registry.register(g, "sets", "Print settings", cmd_show_settings)
    registry.register(g, "q", "Exit from program", cmd_quit)
    registry.alias(g, "q", g, "exit")
    registry.register(g, "alias", "Define aliases for commands", cmd_alias)
    registry.register(
        g, "delete-alias", "Delete aliases for commands", cmd_delete_alias
    )
    registry.register(g, "help", "Help", cmd_help)
    registry.alias(g, "help", g, "?")

    for scope in (Scope.ENVIRONMENT, Scope.TASK, Scope.GENERATOR):
        for name in SHARED:
            registry.alias(g, name, scope, name)
    for scope in (Scope.ENVIRONMENT, Scope.TASK):
        registry.alias(g, "set", scope, "set")
        registry.alias(g, "sets", scope, "sets")
