# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .interfaces import UnitOfWork, UnitOfWorkFactory
from .use_cases.users.get_user_profile import GetUserProfileUseCase
from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.logout_user import LogoutUserUseCase
from .use_cases.users.register_user import RegisterUserUseCase

__all__ = [
    "UnitOfWork",
    "UnitOfWorkFactory",
    "GetUserProfileUseCase",
    "LoginUserUseCase",
    "LogoutUserUseCase",
    "RegisterUserUseCase",
]
