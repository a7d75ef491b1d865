# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:

    id: int
    name: str
    email: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class Credential:
    """Hashed password and session state for exactly one user.

    An empty ``token`` means the user is logged out.
    """

    id: int
    user_id: int
    password_hash: str = ""
    token: str = ""
    login_at: datetime | None = None
    logout_at: datetime | None = None

    @property
    def is_logged_in(self) -> bool:
        return bool(self.token)

    def __repr__(self) -> str:
        return (
            f"Credential(id={self.id}, user_id={self.user_id}, "
            f"logged_in={self.is_logged_in})"
        )


@dataclass(slots=True, frozen=True)
class TokenClaims:

    user_id: int
    email: str
    expires_at: datetime
