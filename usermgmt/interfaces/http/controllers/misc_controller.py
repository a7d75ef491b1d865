# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify

from usermgmt.infrastructure.repositories.users.in_memory import (
    InMemoryCredentialRepository,
    InMemoryUserRepository,
)


class MiscController:
    def __init__(
        self,
        *,
        users: InMemoryUserRepository,
        credentials: InMemoryCredentialRepository,
    ) -> None:
        self._users = users
        self._credentials = credentials

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        users = self._users.count()
        credentials = self._credentials.count()
        # A user without a credential means a registration was only half applied.
        status: dict[str, object] = {
            "ok": users == credentials,
            "users": users,
            "credentials": credentials,
        }
        return jsonify(status)
