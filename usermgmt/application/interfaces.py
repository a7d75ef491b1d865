# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol


class UnitOfWork(Protocol):
    """Groups writes that must succeed or fail together."""

    def __enter__(self) -> UnitOfWork: ...

    def __exit__(self, exc_type, exc, tb) -> None: ...

    def on_rollback(self, action: Callable[[], None]) -> None: ...


UnitOfWorkFactory = Callable[[], UnitOfWork]
