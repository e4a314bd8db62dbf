"""Pytest configuration and shared fixtures."""

import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from aha_api.core.config import Settings
from aha_api.core.context import build_context
from aha_api.services.llm_client import LLMClient
from main import create_app

LLM_URL = "https://llm.test/api/v1/chat/completions"


class FakeUpstream:
    """Stands in for the completion API; records what it was sent."""

    def __init__(self):
        self.status_code = 200
        self.body = {"choices": [{"message": {"role": "assistant", "content": "Hello from the model"}}]}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_payload(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        MONGO_URI="mongodb://localhost:27017",
        MONGO_DB_NAME="aha_test",
        JWT_SECRET="test-secret",
        OPENAI_API_KEY="sk-test",
        LLM_API_URL=LLM_URL,
        BCRYPT_ROUNDS=4,
    )


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def db():
    return AsyncMongoMockClient()["aha_test"]


@pytest.fixture
async def context(settings, db, upstream):
    llm = LLMClient(settings, transport=httpx.MockTransport(upstream))
    ctx = build_context(settings, db, llm=llm)
    await ctx.users.ensure_indexes()
    yield ctx
    await ctx.close()


@pytest.fixture
async def client(context):
    """Async HTTP client bound to an app using the test context."""
    app = create_app(context)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register_and_login(client):
    """Create a user on the given plan and return (user_id, token)."""
    counter = {"n": 0}

    async def _register_and_login(plan="free", password="secret123"):
        counter["n"] += 1
        email = f"user{counter['n']}@example.com"
        response = await client.post(
            "/api/users",
            json={"name": f"User {counter['n']}", "email": email, "password": password, "plan": plan}
        )
        assert response.status_code == 201
        user_id = response.json()["id"]

        response = await client.post("/api/login", json={"email": email, "password": password})
        assert response.status_code == 200
        return user_id, response.json()["token"]

    return _register_and_login
