from __future__ import annotations

from datetime import timedelta

from flask.testing import FlaskClient

from fakes import make_config
from usermgmt.app import create_app
from usermgmt.infrastructure.auth.jwt_tokens import JwtTokenService
from usermgmt.infrastructure.container import Container


def _register(client: FlaskClient, email: str = "a@x.com", password: str = "secret1"):
    return client.post("/register", json={"name": "Ana", "email": email, "password": password})


def _login(client: FlaskClient, email: str = "a@x.com", password: str = "secret1"):
    return client.post("/login", json={"email": email, "password": password})


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_register_login_profile_logout_flow(client: FlaskClient, container: Container) -> None:
    register = _register(client)
    assert register.status_code == 201
    assert register.get_json()["id"] == 1

    login = _login(client)
    assert login.status_code == 200
    token = login.get_json()["token"]

    profile = client.get("/profile", headers=_bearer(token))
    assert profile.status_code == 200
    body = profile.get_json()
    assert {k: body[k] for k in ("id", "name", "email")} == {
        "id": 1,
        "name": "Ana",
        "email": "a@x.com",
    }
    assert "created_at" in body

    logout = client.post("/logout", headers=_bearer(token))
    assert logout.status_code == 200
    assert logout.get_json() == {"message": "Logout successful"}

    credential = container.credential_repository.find_by_user_id(1)
    assert credential is not None
    assert credential.token == ""


def test_token_survives_logout_by_default(client: FlaskClient) -> None:
    _register(client)
    token = _login(client).get_json()["token"]

    assert client.post("/logout", headers=_bearer(token)).status_code == 200

    assert client.get("/profile", headers=_bearer(token)).status_code == 200


def test_token_rejected_after_logout_when_revocation_enabled() -> None:
    app = create_app(container=Container(make_config(JWT_REVOKE_ON_LOGOUT=True)))
    client = app.test_client()
    _register(client)
    token = _login(client).get_json()["token"]

    assert client.post("/logout", headers=_bearer(token)).status_code == 200

    response = client.get("/profile", headers=_bearer(token))
    assert response.status_code == 401
    assert response.get_json()["error"] == "invalid_token"


def test_duplicate_registration_returns_400(client: FlaskClient) -> None:
    assert _register(client).status_code == 201

    response = _register(client, password="another1")

    assert response.status_code == 400
    assert response.get_json()["error"] == "email_already_registered"


def test_bad_login_is_generic(client: FlaskClient) -> None:
    _register(client)

    wrong_password = _login(client, password="wrong-password")
    unknown_email = _login(client, email="nobody@x.com")

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.get_json() == unknown_email.get_json()


def test_profile_for_vanished_user_returns_404(client: FlaskClient, container: Container) -> None:
    token = container.token_service.issue(404, "ghost@x.com")

    response = client.get("/profile", headers=_bearer(token))

    assert response.status_code == 404
    assert response.get_json()["error"] == "user_not_found"


def test_expired_token_returns_401(client: FlaskClient, container: Container) -> None:
    issuer = JwtTokenService(secret=container.config.jwt.secret, ttl=timedelta(seconds=-1))
    token = issuer.issue(1, "a@x.com")

    response = client.get("/profile", headers=_bearer(token))

    assert response.status_code == 401
    assert response.get_json()["error"] == "token_expired"


def test_health_and_metrics(client: FlaskClient) -> None:
    _register(client)

    health = client.get("/api/health")
    metrics = client.get("/api/metrics")

    assert health.get_json() == {"ok": True, "users": 1, "credentials": 1}
    assert metrics.status_code == 200
    assert b"usermgmt_auth_events_total" in metrics.data


def test_responses_carry_request_id(client: FlaskClient) -> None:
    response = client.get("/api/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_logout_revokes_presented_token_after_relogin() -> None:
    app = create_app(container=Container(make_config(JWT_REVOKE_ON_LOGOUT=True)))
    client = app.test_client()
    _register(client)
    first = _login(client).get_json()["token"]
    second = _login(client).get_json()["token"]
    assert first != second

    assert client.post("/logout", headers=_bearer(first)).status_code == 200

    assert client.get("/profile", headers=_bearer(first)).status_code == 401
    assert client.get("/profile", headers=_bearer(second)).status_code == 401
