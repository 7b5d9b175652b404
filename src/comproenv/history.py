# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Fixed-capacity command history."""

from __future__ import annotations

from collections import deque

DEFAULT_CAPACITY = 100


class HistoryBuffer:
    """Ring buffer of executed command lines.

    Pushing into a full buffer drops the oldest entry.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self.capacity = capacity
        self._buf: deque[str] = deque(maxlen=capacity)

    def push(self, command: str) -> None:
        self._buf.append(command)

    def get_all(self) -> list[str]:
        """Entries oldest -> newest."""
        return list(self._buf)

    def __len__(self) -> int:
        return len(self._buf)
