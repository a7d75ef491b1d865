# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from usermgmt.application.use_cases.users.login_user import LoginUserUseCase
from usermgmt.application.use_cases.users.logout_user import LogoutUserUseCase
from usermgmt.application.use_cases.users.register_user import RegisterUserUseCase
from usermgmt.interfaces.http.auth import BearerAuth, current_bearer_token, current_user_id
from usermgmt.interfaces.http.dto.auth import (
    DEFAULT_PASSWORD_MIN_LENGTH,
    LoginRequestDTO,
    LoginResponseDTO,
    LogoutResponseDTO,
    RegisterRequestDTO,
    UserResponseDTO,
)
from usermgmt.shared.errors.validation import raise_validation_error
from usermgmt.shared.logging import logger


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        bearer_auth: BearerAuth,
        password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._bearer_auth = bearer_auth
        self._password_min_length = password_min_length

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(
                request.get_json(silent=True) or {},
                context={"password_min_length": self._password_min_length},
            )
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._register_use_case.execute(dto.name, dto.email, dto.password)

        logger.info(f"auth.register: ok user_id={user.id}")
        return jsonify(UserResponseDTO.from_entity(user).model_dump(mode="json")), 201

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        token = self._login_use_case.execute(dto.email, dto.password)

        logger.info("auth.login: ok")
        return jsonify(LoginResponseDTO(token=token).model_dump()), 200

    def logout(self) -> tuple[Response, int]:
        message = self._logout_use_case.execute(current_user_id(), token=current_bearer_token())

        logger.info("auth.logout: ok")
        return jsonify(LogoutResponseDTO(message=message).model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__)
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule(
            "/logout", view_func=self._bearer_auth.required(self.logout), methods=["POST"]
        )
        return bp
