# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Built-in command tables, one module per state."""

from ..registry import CommandRegistry
from . import environment, generator, global_commands, task


def register_all(registry: CommandRegistry) -> None:
    """Global first: the other states alias some of its commands."""
    global_commands.register(registry)
    environment.register(registry)
    task.register(registry)
    generator.register(registry)
