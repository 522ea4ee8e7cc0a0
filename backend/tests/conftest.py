from __future__ import annotations

import pytest
from flask.testing import FlaskClient

from backend.app import create_app
from backend.config import Settings


@pytest.fixture()
def db_path(tmp_path):
    return tmp_path / "calculations.db"


@pytest.fixture()
def client(db_path) -> FlaskClient:
    app = create_app(Settings(database_path=db_path))
    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client
