"""Shared fixtures for API tests."""

from contextlib import ExitStack

import pytest
from fastapi.testclient import TestClient

from insightboard.api.server import create_app
from insightboard.config import Settings
from tests.fakes import FakeRepository


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, database="mongodb://localhost:27017", logfire_token="")


@pytest.fixture
def make_client(settings):
    """Build a TestClient, lifespan running, whose app queries a fake repository."""
    with ExitStack() as stack:

        def _make(repository: FakeRepository) -> TestClient:
            app = create_app(settings=settings, repository=repository)
            return stack.enter_context(TestClient(app))

        yield _make
