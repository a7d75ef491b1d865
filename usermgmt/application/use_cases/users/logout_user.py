"""Use-case for ending a user's session."""

from __future__ import annotations

from datetime import UTC, datetime

from usermgmt.domain.users.repositories import CredentialRepository, TokenService
from usermgmt.infrastructure.observability import record_auth_event
from usermgmt.shared.logging import logger

LOGOUT_MESSAGE = "Logout successful"


class LogoutUserUseCase:
    """Clears the stored token.

    Tokens already handed out stay valid until they expire unless the
    token service was built with a denylist (``revoke_on_logout``).
    """

    def __init__(
        self,
        *,
        credentials: CredentialRepository,
        tokens: TokenService,
        revoke_on_logout: bool = False,
    ) -> None:
        self._credentials = credentials
        self._tokens = tokens
        self._revoke_on_logout = revoke_on_logout

    def execute(self, user_id: int, token: str | None = None) -> str:
        if self._revoke_on_logout:
            credential = self._credentials.find_by_user_id(user_id)
            stored = credential.token if credential else ""
            # The presented token may predate the stored one after a re-login.
            for candidate in {token, stored} - {None, ""}:
                self._tokens.revoke(candidate)

        self._credentials.clear_token(user_id, datetime.now(UTC))

        record_auth_event("logout", success=True)
        logger.info(f"logout: ok user_id={user_id}")
        return LOGOUT_MESSAGE
