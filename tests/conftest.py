"""Pytest configuration and fixtures."""
import os

os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("JWT_SECRET", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ["GEMINI_API_KEY"] = ""

from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from finroute.config import settings
from finroute.main import app
from finroute.services.plan_generator import PlanOutput, PlanPrompt, get_plan_generator
from finroute.utils.auth import issue_session_token


class FakePlanGenerator:
    """Records prompts and returns canned plan text."""

    def __init__(self, plan_text: str = "Save 20% of your salary every month."):
        self.plan_text = plan_text
        self.error: Exception | None = None
        self.prompts: list[PlanPrompt] = []

    async def generate(self, prompt: PlanPrompt) -> PlanOutput:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return PlanOutput(plan=self.plan_text)


@pytest.fixture
def make_db():
    """Build a MagicMock database whose `db[name]` returns the given collection mocks."""
    def _make_db(**collections):
        db = MagicMock()
        db.__getitem__.side_effect = lambda name: collections.setdefault(name, MagicMock())
        return db

    return _make_db


@pytest.fixture
def fake_generator():
    """A fake AI plan generator."""
    return FakePlanGenerator()


@pytest_asyncio.fixture
async def app_client(fake_generator):
    """
    Create a test client backed by an in-memory database.

    This fixture:
    - Points the app at a fresh mongomock database
    - Replaces the Gemini generator with `fake_generator`
    - Yields an async HTTP client for testing
    """
    test_client = AsyncMongoMockClient()
    test_db = test_client[f"{settings.mongodb_db_name}_test"]

    # Override the database and the AI generator
    from finroute.database import database
    original_db = database.db
    database.db = test_db
    app.dependency_overrides[get_plan_generator] = lambda: fake_generator

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
    database.db = original_db


@pytest.fixture
def signup(app_client):
    """
    Register a user and return request headers carrying their session cookie.
    """
    async def _signup(email: str = "saver@example.com", age: int = 35) -> dict:
        response = await app_client.post(
            "/auth/register",
            json={"email": email, "password": "password123", "age": age},
        )
        assert response.status_code == 201
        token = issue_session_token(response.json()["id"])
        return {"Cookie": f"{settings.session_cookie_name}={token}"}

    return _signup
