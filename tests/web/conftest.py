from __future__ import annotations

import pytest

from hr_portal.main import create_app


@pytest.fixture
def app(transport):
    return create_app(transport=transport, settings_module="hr_portal.config.testing")


@pytest.fixture
def web(app):
    return app.test_client()


@pytest.fixture
def login_as(web):
    def login(role: str = "admin", token: str = "tok-admin") -> None:
        with web.session_transaction() as sess:
            sess[f"{role}_token"] = token

    return login
