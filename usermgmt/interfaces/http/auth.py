# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from flask import g, request

from usermgmt.domain.users.exceptions import InvalidTokenError, MissingTokenError
from usermgmt.domain.users.repositories import TokenService
from usermgmt.shared.logging import logger

F = TypeVar("F", bound=Callable[..., Any])

_BEARER_PREFIX = "Bearer "


def bearer_token_from_header(header: str | None) -> str:
    if not header:
        raise MissingTokenError()
    if not header.startswith(_BEARER_PREFIX):
        raise InvalidTokenError("invalid token format", code="invalid_token_format")
    token = header[len(_BEARER_PREFIX):].strip()
    if not token:
        raise InvalidTokenError("invalid token format", code="invalid_token_format")
    return token


def current_user_id() -> int:
    """User id resolved by :meth:`BearerAuth.required` for this request."""
    return cast(int, g.user_id)


def current_bearer_token() -> str:
    return cast(str, g.bearer_token)


class BearerAuth:
    def __init__(self, tokens: TokenService) -> None:
        self._tokens = tokens

    def required(self, f: F) -> F:
        @wraps(f)
        def inner(*a, **kw):
            try:
                token = bearer_token_from_header(request.headers.get("Authorization"))
                claims = self._tokens.resolve(token)
            except (MissingTokenError, InvalidTokenError) as exc:
                logger.warning(
                    f"Auth failed ({exc.code}) on {request.method} {request.path} "
                    f"from {request.headers.get('X-Forwarded-For', request.remote_addr)}"
                )
                raise

            g.user_id = claims.user_id
            g.token_claims = claims
            g.bearer_token = token
            logger.debug(f"Auth OK: user={claims.user_id} {request.method} {request.path}")
            return f(*a, **kw)

        return cast(F, inner)


__all__ = ["BearerAuth", "bearer_token_from_header", "current_bearer_token", "current_user_id"]
