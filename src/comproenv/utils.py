# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Utility functions for comproenv.
"""

import re
import shlex

_PLACEHOLDER = re.compile(r'\{([A-Za-z_][A-Za-z0-9_]*)\}')


def shell_quote(s: str) -> str:
    """Shell-escape string for safe substitution in shell commands."""
    return shlex.quote(s)


def substitute_placeholders(template: str, values: dict[str, str]) -> str:
    """Substitute {placeholder} with shell-safe values.

    Used for compiler_/runner_ settings, e.g.
    ``g++ -O2 {src} -o {bin}``.

    Args:
        template: Command with {placeholder} syntax
        values: Placeholder values

    Returns:
        The substituted command

    Raises:
        ValueError: If the template names an unknown placeholder
    """
    placeholders = _PLACEHOLDER.findall(template)
    if not placeholders:
        return template

    missing = [p for p in placeholders if p not in values]
    if missing:
        provided = ', '.join(sorted(values)) if values else 'none'
        raise ValueError(
            f"Unknown placeholders: {', '.join(missing)}. "
            f"Available: {provided}"
        )

    result = template
    for placeholder in set(placeholders):
        result = result.replace(
            f'{{{placeholder}}}', shell_quote(values[placeholder])
        )
    return result


def split_command(line: str) -> list[str]:
    """Whitespace tokenization used by the dispatch loop."""
    return line.split()
