"""Pytest configuration and shared fixtures."""

import pytest


@pytest.fixture(scope="function")
def app():
    """Create test Flask app."""
    from stubapi.app import create_app
    from stubapi.config import TestingConfig

    app = create_app(TestingConfig)
    app.config["TESTING"] = True
    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()
