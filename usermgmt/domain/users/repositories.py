# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import Credential, TokenClaims, User


class UserRepository(Protocol):
    def find_by_email(self, email: str) -> User | None: ...
    def find_by_id(self, user_id: int) -> User | None: ...
    def add(self, user: User) -> User: ...
    def remove(self, user_id: int) -> None: ...


class CredentialRepository(Protocol):
    def add(self, credential: Credential) -> Credential: ...
    def find_by_user_id(self, user_id: int) -> Credential | None: ...
    def update_token(self, user_id: int, token: str, login_at: datetime) -> None: ...
    def clear_token(self, user_id: int, logout_at: datetime) -> None: ...
    def remove(self, user_id: int) -> None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenService(Protocol):
    def issue(self, user_id: int, email: str) -> str: ...
    def resolve(self, token: str) -> TokenClaims: ...
    def revoke(self, token: str) -> None: ...
