# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
comproenv CLI entry point and read-eval loop.

Design:
- CLI owns process startup: logging, signals, document paths.
- Shell is the session engine (store+workspace+executor+config injected).
- UI is a terminal-friendly PromptSession unless COMPROENV_LEGACY_UI=1.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
from collections.abc import Callable
from pathlib import Path

from . import config
from .executor import SubprocessExecutor
from .logging_setup import console_level_from_env, setup_logging
from .shell import Shell, write_crash_log
from .ui import PromptToolkitUI

logger = logging.getLogger(__name__)

USAGE = "usage: comproenv [CONFIG [ENVIRONMENTS]]"


def run_repl(
    shell: Shell,
    ui: PromptToolkitUI | None = None,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
    interactive: bool = True,
) -> None:
    """Run the read-eval loop until ``shell.running`` turns False.

    On an interactive terminal end-of-file is ignored and the loop
    re-prompts. When input is not a terminal, end-of-file ends the session
    like ``q`` does, minus the goodbye message.
    """
    write = ui.write if ui is not None else output_fn

    while shell.running:
        try:
            prompt = shell.prompt()
            if ui is not None:
                line = ui.read(prompt)
            else:
                line = input_fn(prompt + " ")
        except KeyboardInterrupt:
            write("")
            continue
        except EOFError:
            if interactive:
                write("")
                continue
            shell.stop(shell.autosave())
            break

        try:
            shell.handle_line(line or "")
        except Exception as e:
            write_crash_log(e, state=shell.state.state_name, raw_command=line)
            logger.exception("Unhandled exception in %r", line)
            write(f"[ERROR] Unhandled exception: {type(e).__name__}: {e}")


def check_python_interpreter(shell: Shell) -> bool:
    """Report the configured Python interpreter's version."""
    interpreter = shell.global_settings.get("python_interpreter", "python")
    exit_code, stdout, stderr, _started, _ms = shell.executor.run(
        f"{interpreter} --version"
    )
    if exit_code != 0:
        logger.warning("Python interpreter %s is unavailable", interpreter)
        shell.write(
            f"Warning: Python interpreter '{interpreter}' was not found; "
            f"change it with: set python_interpreter <path>"
        )
        return False
    version = (stdout or stderr).strip()
    logger.info("Using %s (%s)", interpreter, version)
    return True


def _ignore_interrupts() -> None:
    """A running child gets Ctrl+C and Ctrl+Z; the shell keeps going."""
    signal.signal(signal.SIGINT, lambda _signum, _frame: None)
    if hasattr(signal, "SIGTSTP"):
        signal.signal(signal.SIGTSTP, signal.SIG_IGN)


def document_paths(
    argv: list[str], cfg: config.YAMLConfig
) -> tuple[Path, Path]:
    """Config and environments document paths from the command line.

    Raises:
        SystemExit: on more than two arguments
    """
    if len(argv) > 2:
        print(USAGE, file=sys.stderr)
        raise SystemExit(2)
    documents = cfg.documents
    defaults = [
        documents.get("config", "config.yaml"),
        documents.get("environments", "environments.yaml"),
    ]
    paths = list(argv) + defaults[len(argv):]
    return Path(paths[0]), Path(paths[1])


def main(argv: list[str] | None = None) -> None:
    """Main entry point for comproenv."""
    args = sys.argv[1:] if argv is None else argv

    setup_logging(
        log_dir=config.logs_dir(config.get_data_root()),
        console_level=console_level_from_env(),
    )
    cfg = config.load_system_config()
    config_path, environments_path = document_paths(args, cfg)

    shell = Shell.create(
        config_path,
        environments_path,
        workspace_root=Path.cwd(),
        executor=SubprocessExecutor(force_color=True),
        config=cfg,
    )

    ui: PromptToolkitUI | None = None
    if os.environ.get("COMPROENV_LEGACY_UI") != "1":
        ui = PromptToolkitUI(shell)
        shell.output_fn = ui.write

    _ignore_interrupts()
    shell.start()
    check_python_interpreter(shell)

    run_repl(shell, ui=ui, interactive=sys.stdin.isatty())
    sys.exit(shell.exit_code)
