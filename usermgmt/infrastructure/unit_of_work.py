# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""In-process unit of work built on compensating actions."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager

from usermgmt.application.interfaces import UnitOfWork
from usermgmt.shared.logging import logger


class CompensatingUnitOfWork(AbstractContextManager, UnitOfWork):
    """Runs registered undo actions in reverse order when the block raises.

    The in-memory stores have no shared transaction, so a failed second
    write is repaired by undoing the first one.
    """

    def __init__(self) -> None:
        self._actions: list[Callable[[], None]] | None = None

    def __enter__(self) -> CompensatingUnitOfWork:
        self._actions = []
        logger.debug("uow: started")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        actions, self._actions = self._actions or [], None
        if exc is None:
            logger.debug("uow: committed")
            return
        logger.warning(f"uow: rollback due to {exc_type.__name__}")
        for action in reversed(actions):
            try:
                action()
            except Exception:
                logger.exception("uow: compensation failed, manual cleanup required")
                raise

    def on_rollback(self, action: Callable[[], None]) -> None:
        if self._actions is None:
            raise RuntimeError("UnitOfWork not started")
        self._actions.append(action)


__all__ = ["CompensatingUnitOfWork"]
