import asyncio
import json
import os
import tempfile
import uuid
from pathlib import Path

# Point the app at a throwaway database before anything reads settings
_TEST_DIR = Path(tempfile.mkdtemp(prefix="moodlogger-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR / 'test.db'}"
os.environ["DATABASE_CREATE_TABLES"] = "true"
os.environ["LLM_GATEWAY_API_KEY"] = "test-gateway-key"
os.environ["DEFAULT_TIMEZONE"] = "UTC"

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine

from moodlogger.api.deps import get_gateway
from moodlogger.config import get_settings
from moodlogger.db.session import build_session_factory, create_tables
from moodlogger.services.gateway import GatewayClient
from streams import sse_body

get_settings.cache_clear()

from moodlogger.main import app  # noqa: E402

GATEWAY_URL = "https://gateway.test/v1/chat/completions"


class FakeGateway:
    """Scripted stand-in for the upstream completions endpoint."""

    def __init__(self):
        self.requests: list[dict] = []
        self.status_code = 200
        self.body = sse_body("Hello", " there")
        self.headers = {"content-type": "text/event-stream"}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(
            {
                "authorization": request.headers.get("authorization"),
                "json": json.loads(request.content),
            }
        )
        return httpx.Response(self.status_code, content=self.body, headers=self.headers)

    def client(self, api_key: str = "test-gateway-key") -> GatewayClient:
        return GatewayClient(
            api_key=api_key,
            url=GATEWAY_URL,
            model="test-model",
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture(scope="module")
def test_client():
    """FastAPI test client running the full lifespan."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def fake_gateway():
    """Route every chat request to a scripted gateway."""
    gateway = FakeGateway()
    app.dependency_overrides[get_gateway] = lambda: gateway.client()
    yield gateway
    app.dependency_overrides.pop(get_gateway, None)


@pytest.fixture
def unconfigured_gateway():
    """Gateway with no credential; records any request that slips through."""
    gateway = FakeGateway()
    app.dependency_overrides[get_gateway] = lambda: gateway.client(api_key="")
    yield gateway
    app.dependency_overrides.pop(get_gateway, None)


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def auth_headers(user_id):
    return {"X-User-Id": str(user_id)}


@pytest.fixture
def seed(test_client):
    """Insert ORM rows directly, bypassing the API."""
    def _seed(*rows):
        async def _insert():
            engine = create_async_engine(os.environ["DATABASE_URL"])
            session_factory = build_session_factory(engine)
            async with session_factory() as session:
                session.add_all(rows)
                await session.commit()
            await engine.dispose()

        asyncio.run(_insert())
        return rows

    return _seed


@pytest_asyncio.fixture
async def db_session():
    """Session on a private in-memory database."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    await create_tables(engine)
    session_factory = build_session_factory(engine)
    async with session_factory() as session:
        yield session
    await engine.dispose()
