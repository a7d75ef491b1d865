# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed bearer tokens (HS256 JWT) carrying the user id and email."""

from __future__ import annotations

import re
import secrets
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from usermgmt.domain.users.entities import TokenClaims
from usermgmt.domain.users.exceptions import (
    ExpiredTokenError,
    InvalidTokenError,
    MissingTokenError,
    TokenSigningError,
)
from usermgmt.domain.users.repositories import TokenService
from usermgmt.infrastructure.auth.denylist import InMemoryTokenDenylist
from usermgmt.shared.logging import logger

_NUMERAL = re.compile(r"[+-]?[0-9]+", re.ASCII)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def coerce_user_id(value: Any) -> int:
    """Accept ``7``, ``7.0`` or ``"7"``; anything else is an invalid token."""
    if isinstance(value, bool):
        raise InvalidTokenError("invalid user ID type")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise InvalidTokenError("invalid user ID format")
    if isinstance(value, str):
        if _NUMERAL.fullmatch(value):
            return int(value)
        raise InvalidTokenError("invalid user ID format")
    raise InvalidTokenError("invalid user ID type")


class JwtTokenService(TokenService):
    def __init__(
        self,
        *,
        secret: str,
        ttl: timedelta = timedelta(hours=24),
        algorithm: str = "HS256",
        previous_secrets: Iterable[str] = (),
        denylist: InMemoryTokenDenylist | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self._previous_secrets = tuple(s for s in previous_secrets if s and s != secret)
        self._ttl = ttl
        self._algorithm = algorithm
        self._denylist = denylist
        self._clock = clock

    def issue(self, user_id: int, email: str) -> str:
        now = self._clock()
        payload = {
            "user_id": user_id,
            "email": email,
            "iat": now,
            "exp": now + self._ttl,
            "jti": secrets.token_urlsafe(12),
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=self._algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise TokenSigningError("cannot sign token") from exc

    def resolve(self, token: str) -> TokenClaims:
        if not token:
            raise MissingTokenError()
        if self._denylist is not None and self._denylist.contains(token):
            logger.info("tokens: rejected revoked token")
            raise InvalidTokenError()

        payload = self._decode(token)

        if "user_id" not in payload:
            raise InvalidTokenError("invalid token claims")
        user_id = coerce_user_id(payload["user_id"])
        email = payload.get("email")
        if not isinstance(email, str):
            raise InvalidTokenError("invalid token claims")
        try:
            expires_at = datetime.fromtimestamp(payload["exp"], UTC)
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidTokenError("invalid token claims") from exc
        return TokenClaims(user_id=user_id, email=email, expires_at=expires_at)

    def revoke(self, token: str) -> None:
        if self._denylist is None:
            logger.debug("tokens: revocation disabled, nothing to do")
            return
        try:
            payload = self._decode(token)
        except InvalidTokenError:
            # Expired or foreign tokens are already unusable.
            return
        self._denylist.add(token, float(payload["exp"]))

    def _decode(self, token: str) -> dict[str, Any]:
        for secret in (self._secret, *self._previous_secrets):
            try:
                return jwt.decode(
                    token,
                    secret,
                    algorithms=[self._algorithm],
                    options={"require": ["exp"]},
                )
            except jwt.InvalidSignatureError:
                continue
            except jwt.ExpiredSignatureError as exc:
                raise ExpiredTokenError() from exc
            except jwt.InvalidTokenError as exc:
                logger.debug(f"tokens: rejected ({type(exc).__name__})")
                raise InvalidTokenError() from exc
        raise InvalidTokenError()


__all__ = ["JwtTokenService", "coerce_user_id"]
