# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import time
from collections.abc import Callable
from threading import Lock

from usermgmt.shared.logging import logger


def _fingerprint(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


class InMemoryTokenDenylist:
    """Revoked tokens kept until their own expiry.

    Entries are keyed by a SHA-256 fingerprint so raw tokens never sit in
    memory longer than the request that carried them.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = Lock()
        self._entries: dict[str, float] = {}

    def add(self, token: str, expires_at: float) -> None:
        with self._lock:
            self._prune()
            self._entries[_fingerprint(token)] = expires_at
        logger.debug("denylist: token revoked")

    def contains(self, token: str) -> bool:
        key = _fingerprint(token)
        with self._lock:
            expires_at = self._entries.get(key)
            if expires_at is None:
                return False
            if self._clock() >= expires_at:
                self._entries.pop(key, None)
                return False
            return True

    def __len__(self) -> int:
        with self._lock:
            self._prune()
            return len(self._entries)

    def _prune(self) -> None:
        now = self._clock()
        for key in [k for k, exp in self._entries.items() if now >= exp]:
            del self._entries[key]


__all__ = ["InMemoryTokenDenylist"]
