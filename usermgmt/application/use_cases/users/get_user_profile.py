"""Use-case for reading the public profile of a user."""

from __future__ import annotations

from usermgmt.domain.users.entities import User
from usermgmt.domain.users.exceptions import UserNotFoundError
from usermgmt.domain.users.repositories import UserRepository


class GetUserProfileUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: int) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(context={"user_id": user_id})
        return user
