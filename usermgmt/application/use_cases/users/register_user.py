# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from usermgmt.application.interfaces import UnitOfWorkFactory
from usermgmt.domain.users.entities import Credential, User
from usermgmt.domain.users.exceptions import EmailAlreadyRegisteredError
from usermgmt.domain.users.repositories import (
    CredentialRepository,
    PasswordHasher,
    UserRepository,
)
from usermgmt.infrastructure.observability import record_auth_event
from usermgmt.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        credentials: CredentialRepository,
        password_hasher: PasswordHasher,
        unit_of_work: UnitOfWorkFactory,
    ) -> None:
        self._users = users
        self._credentials = credentials
        self._password_hasher = password_hasher
        self._unit_of_work = unit_of_work

    def execute(self, name: str, email: str, password: str) -> User:
        existing = self._users.find_by_email(email)
        if existing:
            record_auth_event("register", success=False)
            raise EmailAlreadyRegisteredError()

        hashed = self._password_hasher.hash(password)
        now = datetime.now(UTC)

        with self._unit_of_work() as uow:
            try:
                persisted = self._users.add(User(id=0, name=name, email=email, created_at=now))
            except EmailAlreadyRegisteredError:
                record_auth_event("register", success=False)
                raise
            uow.on_rollback(lambda: self._users.remove(persisted.id))
            self._credentials.add(
                Credential(id=0, user_id=persisted.id, password_hash=hashed)
            )

        record_auth_event("register", success=True)
        logger.info(f"register: created user_id={persisted.id}")
        return persisted
