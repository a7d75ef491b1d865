# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from usermgmt.domain.users.exceptions import InvalidCredentialsError
from usermgmt.domain.users.repositories import (
    CredentialRepository,
    PasswordHasher,
    TokenService,
    UserRepository,
)
from usermgmt.infrastructure.observability import record_auth_event
from usermgmt.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        credentials: CredentialRepository,
        password_hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self._users = users
        self._credentials = credentials
        self._password_hasher = password_hasher
        self._tokens = tokens

    def execute(self, email: str, password: str) -> str:
        user = self._users.find_by_email(email)
        credential = self._credentials.find_by_user_id(user.id) if user else None
        password_valid = credential is not None and self._password_hasher.verify(
            password, credential.password_hash
        )

        # Unknown email, missing credential and wrong password look the same to the caller.
        if not password_valid:
            record_auth_event("login", success=False)
            logger.info("login: rejected")
            raise InvalidCredentialsError()

        token = self._tokens.issue(user.id, user.email)
        self._credentials.update_token(user.id, token, datetime.now(UTC))

        record_auth_event("login", success=True)
        logger.info(f"login: ok user_id={user.id}")
        return token
