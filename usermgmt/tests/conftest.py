from __future__ import annotations

import pytest
from flask import Flask
from flask.testing import FlaskClient

from fakes import make_config
from usermgmt.app import create_app
from usermgmt.infrastructure.container import Container


@pytest.fixture()
def container() -> Container:
    return Container(make_config())


@pytest.fixture()
def flask_app(container: Container) -> Flask:
    return create_app(container=container)


@pytest.fixture()
def client(flask_app: Flask) -> FlaskClient:
    return flask_app.test_client()
