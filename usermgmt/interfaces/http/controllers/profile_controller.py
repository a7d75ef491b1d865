# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from usermgmt.application.use_cases.users.get_user_profile import GetUserProfileUseCase
from usermgmt.interfaces.http.auth import BearerAuth, current_user_id
from usermgmt.interfaces.http.dto.auth import UserResponseDTO


class ProfileController:
    def __init__(
        self,
        *,
        profile_use_case: GetUserProfileUseCase,
        bearer_auth: BearerAuth,
    ) -> None:
        self._profile_use_case = profile_use_case
        self._bearer_auth = bearer_auth

    def profile(self) -> tuple[Response, int]:
        user = self._profile_use_case.execute(current_user_id())
        return jsonify(UserResponseDTO.from_entity(user).model_dump(mode="json")), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("profile", __name__)
        bp.add_url_rule(
            "/profile", view_func=self._bearer_auth.required(self.profile), methods=["GET"]
        )
        return bp
