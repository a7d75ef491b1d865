# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from usermgmt.application.services.password_hashing import WerkzeugPasswordHasher
from usermgmt.application.use_cases.users.get_user_profile import GetUserProfileUseCase
from usermgmt.application.use_cases.users.login_user import LoginUserUseCase
from usermgmt.application.use_cases.users.logout_user import LogoutUserUseCase
from usermgmt.application.use_cases.users.register_user import RegisterUserUseCase
from usermgmt.infrastructure.auth.denylist import InMemoryTokenDenylist
from usermgmt.infrastructure.auth.jwt_tokens import JwtTokenService
from usermgmt.infrastructure.repositories.users.in_memory import (
    InMemoryCredentialRepository,
    InMemoryUserRepository,
)
from usermgmt.infrastructure.unit_of_work import CompensatingUnitOfWork
from usermgmt.interfaces.http.auth import BearerAuth
from usermgmt.interfaces.http.controllers.auth_controller import AuthController
from usermgmt.interfaces.http.controllers.misc_controller import MiscController
from usermgmt.interfaces.http.controllers.profile_controller import ProfileController
from usermgmt.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or load_config()

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher(method=self.config.password.hash_method)

    @cached_property
    def user_repository(self) -> InMemoryUserRepository:
        return InMemoryUserRepository()

    @cached_property
    def credential_repository(self) -> InMemoryCredentialRepository:
        return InMemoryCredentialRepository()

    @cached_property
    def token_denylist(self) -> InMemoryTokenDenylist | None:
        if not self.config.jwt.revoke_on_logout:
            return None
        return InMemoryTokenDenylist()

    @cached_property
    def token_service(self) -> JwtTokenService:
        jwt_config = self.config.jwt
        return JwtTokenService(
            secret=jwt_config.secret,
            ttl=jwt_config.ttl,
            algorithm=jwt_config.algorithm,
            previous_secrets=jwt_config.previous_secrets,
            denylist=self.token_denylist,
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            credentials=self.credential_repository,
            password_hasher=self.password_hasher,
            unit_of_work=CompensatingUnitOfWork,
        )

    @cached_property
    def get_user_profile_use_case(self) -> GetUserProfileUseCase:
        return GetUserProfileUseCase(users=self.user_repository)

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            credentials=self.credential_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_service,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(
            credentials=self.credential_repository,
            tokens=self.token_service,
            revoke_on_logout=self.config.jwt.revoke_on_logout,
        )

    @cached_property
    def bearer_auth(self) -> BearerAuth:
        return BearerAuth(self.token_service)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            bearer_auth=self.bearer_auth,
            password_min_length=self.config.password.min_length,
        )

    @cached_property
    def profile_controller(self) -> ProfileController:
        return ProfileController(
            profile_use_case=self.get_user_profile_use_case,
            bearer_auth=self.bearer_auth,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(
            users=self.user_repository,
            credentials=self.credential_repository,
        )
