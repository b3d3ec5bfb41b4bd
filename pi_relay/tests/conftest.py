"""Shared fixtures for relay tests."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from pi_relay.app import create_app
from pi_relay.tests.util import FakePiApi, make_config


@pytest.fixture
def relay_config():
    return make_config()


@pytest.fixture
def app(relay_config):
    return create_app(relay_config)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def pi_api():
    fake = FakePiApi()
    with patch("pi_relay.services.pi_api.requests.request", new=fake):
        yield fake
