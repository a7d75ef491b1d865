# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from usermgmt.domain.users.entities import Credential, User
from usermgmt.domain.users.exceptions import (
    CredentialAlreadyExistsError,
    CredentialNotFoundError,
    EmailAlreadyRegisteredError,
)
from usermgmt.domain.users.repositories import CredentialRepository, UserRepository
from usermgmt.infrastructure.locks import ReadWriteLock
from usermgmt.shared.logging import logger


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._users: dict[int, User] = {}
        self._by_email: dict[str, int] = {}
        self._seq = 0

    def find_by_email(self, email: str) -> User | None:
        with self._lock.read():
            user_id = self._by_email.get(email)
            return self._users.get(user_id) if user_id is not None else None

    def find_by_id(self, user_id: int) -> User | None:
        with self._lock.read():
            return self._users.get(user_id)

    def add(self, user: User) -> User:
        with self._lock.write():
            # Index check and insert share the write lock, so two racing
            # registrations for one email cannot both land.
            if user.email in self._by_email:
                raise EmailAlreadyRegisteredError()
            self._seq += 1
            new_user = replace(user, id=self._seq)
            self._users[new_user.id] = new_user
            self._by_email[new_user.email] = new_user.id
        logger.debug(f"users: added id={new_user.id}")
        return new_user

    def remove(self, user_id: int) -> None:
        with self._lock.write():
            user = self._users.pop(user_id, None)
            if user is not None:
                self._by_email.pop(user.email, None)
        if user is not None:
            logger.debug(f"users: removed id={user_id}")

    def count(self) -> int:
        with self._lock.read():
            return len(self._users)


class InMemoryCredentialRepository(CredentialRepository):
    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._credentials: dict[int, Credential] = {}
        self._seq = 0

    def add(self, credential: Credential) -> Credential:
        with self._lock.write():
            if credential.user_id in self._credentials:
                raise CredentialAlreadyExistsError(context={"user_id": credential.user_id})
            self._seq += 1
            stored = replace(credential, id=self._seq)
            self._credentials[stored.user_id] = stored
        logger.debug(f"credentials: added id={stored.id} user_id={stored.user_id}")
        return stored

    def find_by_user_id(self, user_id: int) -> Credential | None:
        with self._lock.read():
            return self._credentials.get(user_id)

    def update_token(self, user_id: int, token: str, login_at: datetime) -> None:
        with self._lock.write():
            current = self._require(user_id)
            self._credentials[user_id] = replace(current, token=token, login_at=login_at)

    def clear_token(self, user_id: int, logout_at: datetime) -> None:
        with self._lock.write():
            current = self._require(user_id)
            self._credentials[user_id] = replace(current, token="", logout_at=logout_at)

    def remove(self, user_id: int) -> None:
        with self._lock.write():
            self._credentials.pop(user_id, None)

    def count(self) -> int:
        with self._lock.read():
            return len(self._credentials)

    def _require(self, user_id: int) -> Credential:
        current = self._credentials.get(user_id)
        if current is None:
            raise CredentialNotFoundError(
                "authentication not found", context={"user_id": user_id}
            )
        return current


__all__ = ["InMemoryCredentialRepository", "InMemoryUserRepository"]
