"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from usermgmt.domain.users.exceptions import PasswordHashingError
from usermgmt.domain.users.repositories import PasswordHasher
from usermgmt.shared.logging import logger


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted scrypt/pbkdf2 hashing with constant-time verification.

    ``method`` is passed straight to :func:`werkzeug.security.generate_password_hash`.
    The scrypt default costs roughly 100ms per hash on current hardware.
    """

    def __init__(self, method: str = "scrypt", salt_length: int = 16) -> None:
        self._method = method
        self._salt_length = salt_length

    def hash(self, password: str) -> str:
        try:
            return str(
                generate_password_hash(
                    password, method=self._method, salt_length=self._salt_length
                )
            )
        except (ValueError, TypeError) as exc:
            raise PasswordHashingError(f"cannot hash password with {self._method!r}") from exc

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return bool(check_password_hash(hashed, password))
        except ValueError:
            logger.warning("password_hasher: stored hash uses an unknown method")
            return False
