from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from prometheus_client import REGISTRY

from fakes import TEST_JWT_SECRET, DeterministicHasher
from usermgmt.application.use_cases.users.get_user_profile import GetUserProfileUseCase
from usermgmt.application.use_cases.users.login_user import LoginUserUseCase
from usermgmt.application.use_cases.users.logout_user import LOGOUT_MESSAGE, LogoutUserUseCase
from usermgmt.application.use_cases.users.register_user import RegisterUserUseCase
from usermgmt.domain.users.entities import Credential, User
from usermgmt.domain.users.exceptions import (
    CredentialNotFoundError,
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidTokenError,
    PasswordHashingError,
    UserNotFoundError,
)
from usermgmt.infrastructure.auth.denylist import InMemoryTokenDenylist
from usermgmt.infrastructure.auth.jwt_tokens import JwtTokenService
from usermgmt.infrastructure.repositories.users.in_memory import (
    InMemoryCredentialRepository,
    InMemoryUserRepository,
)
from usermgmt.infrastructure.unit_of_work import CompensatingUnitOfWork


class FailingCredentialRepository(InMemoryCredentialRepository):
    def add(self, credential: Credential) -> Credential:
        raise RuntimeError("credential store unavailable")


class StaleReadUserRepository(InMemoryUserRepository):
    """Email lookups miss, as if another request registered in between."""

    def find_by_email(self, email: str) -> User | None:
        return None


class FailingHasher(DeterministicHasher):
    def hash(self, password: str) -> str:
        raise PasswordHashingError("boom")


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def credentials() -> InMemoryCredentialRepository:
    return InMemoryCredentialRepository()


@pytest.fixture()
def tokens() -> JwtTokenService:
    return JwtTokenService(secret=TEST_JWT_SECRET, ttl=timedelta(hours=24))


@pytest.fixture()
def register(
    users: InMemoryUserRepository, credentials: InMemoryCredentialRepository
) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        users=users,
        credentials=credentials,
        password_hasher=DeterministicHasher(),
        unit_of_work=CompensatingUnitOfWork,
    )


@pytest.fixture()
def login(
    users: InMemoryUserRepository,
    credentials: InMemoryCredentialRepository,
    tokens: JwtTokenService,
) -> LoginUserUseCase:
    return LoginUserUseCase(
        users=users,
        credentials=credentials,
        password_hasher=DeterministicHasher(),
        tokens=tokens,
    )


@pytest.fixture()
def logout(
    credentials: InMemoryCredentialRepository, tokens: JwtTokenService
) -> LogoutUserUseCase:
    return LogoutUserUseCase(credentials=credentials, tokens=tokens)


def test_register_user_success(
    register: RegisterUserUseCase, credentials: InMemoryCredentialRepository
) -> None:
    user = register.execute("Ana", "a@x.com", "secret1")

    assert user.id == 1
    assert user.name == "Ana"
    assert user.email == "a@x.com"
    credential = credentials.find_by_user_id(user.id)
    assert credential is not None
    assert credential.password_hash == "hashed:secret1"
    assert credential.token == ""


def test_register_assigns_fresh_ids(register: RegisterUserUseCase) -> None:
    ids = [register.execute("u", f"user{i}@x.com", "secret1").id for i in range(5)]

    assert ids == [1, 2, 3, 4, 5]


def test_register_user_duplicate_raises(register: RegisterUserUseCase) -> None:
    register.execute("Ana", "a@x.com", "secret1")

    with pytest.raises(EmailAlreadyRegisteredError) as exc_info:
        register.execute("Other", "a@x.com", "other-password")

    assert exc_info.value.message == "email already registered"


def _register_failures() -> float:
    value = REGISTRY.get_sample_value(
        "usermgmt_auth_events_total", {"event": "register", "outcome": "failure"}
    )
    return value or 0.0


def test_register_race_loser_counts_as_failure(
    credentials: InMemoryCredentialRepository,
) -> None:
    users = StaleReadUserRepository()
    register = RegisterUserUseCase(
        users=users,
        credentials=credentials,
        password_hasher=DeterministicHasher(),
        unit_of_work=CompensatingUnitOfWork,
    )
    register.execute("Ana", "a@x.com", "secret1")
    before = _register_failures()

    with pytest.raises(EmailAlreadyRegisteredError):
        register.execute("Other", "a@x.com", "secret2")

    assert _register_failures() == before + 1
    assert users.count() == 1
    assert credentials.count() == 1


def test_register_email_is_case_sensitive(register: RegisterUserUseCase) -> None:
    first = register.execute("Ana", "a@x.com", "secret1")
    second = register.execute("Ana", "A@x.com", "secret1")

    assert first.id != second.id


def test_register_rolls_back_user_when_credential_write_fails(
    users: InMemoryUserRepository,
) -> None:
    register = RegisterUserUseCase(
        users=users,
        credentials=FailingCredentialRepository(),
        password_hasher=DeterministicHasher(),
        unit_of_work=CompensatingUnitOfWork,
    )

    with pytest.raises(RuntimeError):
        register.execute("Ana", "a@x.com", "secret1")

    assert users.find_by_email("a@x.com") is None
    assert users.count() == 0


def test_register_hashing_failure_stores_nothing(
    users: InMemoryUserRepository, credentials: InMemoryCredentialRepository
) -> None:
    register = RegisterUserUseCase(
        users=users,
        credentials=credentials,
        password_hasher=FailingHasher(),
        unit_of_work=CompensatingUnitOfWork,
    )

    with pytest.raises(PasswordHashingError):
        register.execute("Ana", "a@x.com", "secret1")

    assert users.count() == 0
    assert credentials.count() == 0


def test_login_user_success(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    tokens: JwtTokenService,
    credentials: InMemoryCredentialRepository,
) -> None:
    user = register.execute("Ana", "a@x.com", "secret1")

    token = login.execute("a@x.com", "secret1")

    assert tokens.resolve(token).user_id == user.id
    credential = credentials.find_by_user_id(user.id)
    assert credential is not None
    assert credential.token == token
    assert credential.login_at is not None


def test_login_wrong_password_and_unknown_email_are_indistinguishable(
    register: RegisterUserUseCase, login: LoginUserUseCase
) -> None:
    register.execute("Ana", "a@x.com", "secret1")

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        login.execute("a@x.com", "wrong")
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        login.execute("nobody@x.com", "secret1")

    assert wrong_password.value.to_dict() == unknown_email.value.to_dict()
    assert wrong_password.value.message == "invalid email or password"


def test_login_without_credential_is_generic_failure(
    users: InMemoryUserRepository, login: LoginUserUseCase
) -> None:
    users.add(User(id=0, name="Ana", email="a@x.com", created_at=datetime.now(UTC)))

    with pytest.raises(InvalidCredentialsError):
        login.execute("a@x.com", "secret1")


def test_logout_clears_token(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    logout: LogoutUserUseCase,
    credentials: InMemoryCredentialRepository,
) -> None:
    user = register.execute("Ana", "a@x.com", "secret1")
    login.execute("a@x.com", "secret1")

    message = logout.execute(user.id)

    assert message == LOGOUT_MESSAGE == "Logout successful"
    credential = credentials.find_by_user_id(user.id)
    assert credential is not None
    assert credential.token == ""
    assert credential.logout_at is not None


def test_logout_does_not_revoke_issued_token(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    logout: LogoutUserUseCase,
    tokens: JwtTokenService,
) -> None:
    user = register.execute("Ana", "a@x.com", "secret1")
    token = login.execute("a@x.com", "secret1")

    logout.execute(user.id)

    # Validity is signature and expiry based; the stored copy is irrelevant.
    assert tokens.resolve(token).user_id == user.id


def test_logout_with_revocation_rejects_issued_token(
    users: InMemoryUserRepository,
    credentials: InMemoryCredentialRepository,
    register: RegisterUserUseCase,
) -> None:
    tokens = JwtTokenService(secret=TEST_JWT_SECRET, denylist=InMemoryTokenDenylist())
    login = LoginUserUseCase(
        users=users,
        credentials=credentials,
        password_hasher=DeterministicHasher(),
        tokens=tokens,
    )
    logout = LogoutUserUseCase(credentials=credentials, tokens=tokens, revoke_on_logout=True)
    user = register.execute("Ana", "a@x.com", "secret1")
    token = login.execute("a@x.com", "secret1")

    logout.execute(user.id)

    with pytest.raises(InvalidTokenError):
        tokens.resolve(token)


def test_logout_with_revocation_rejects_presented_and_stored_tokens(
    users: InMemoryUserRepository,
    credentials: InMemoryCredentialRepository,
    register: RegisterUserUseCase,
) -> None:
    tokens = JwtTokenService(secret=TEST_JWT_SECRET, denylist=InMemoryTokenDenylist())
    login = LoginUserUseCase(
        users=users,
        credentials=credentials,
        password_hasher=DeterministicHasher(),
        tokens=tokens,
    )
    logout = LogoutUserUseCase(credentials=credentials, tokens=tokens, revoke_on_logout=True)
    user = register.execute("Ana", "a@x.com", "secret1")
    older = login.execute("a@x.com", "secret1")
    newer = login.execute("a@x.com", "secret1")

    logout.execute(user.id, token=older)

    for token in (older, newer):
        with pytest.raises(InvalidTokenError):
            tokens.resolve(token)


def test_logout_unknown_user_is_storage_error(logout: LogoutUserUseCase) -> None:
    with pytest.raises(CredentialNotFoundError) as exc_info:
        logout.execute(42)

    assert exc_info.value.status == 500


def test_get_profile(register: RegisterUserUseCase, users: InMemoryUserRepository) -> None:
    created = register.execute("Ana", "a@x.com", "secret1")

    profile = GetUserProfileUseCase(users=users).execute(created.id)

    assert profile == created


def test_get_profile_not_found(users: InMemoryUserRepository) -> None:
    with pytest.raises(UserNotFoundError) as exc_info:
        GetUserProfileUseCase(users=users).execute(99)

    assert exc_info.value.status == 404
