from datetime import datetime

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from profilequest.ai.avatar import AvatarService, get_avatar_service
from profilequest.ai.generator import GenerationService, get_generation_service
from profilequest.core.dependencies import get_clock
from profilequest.db.base import Base
from profilequest.db.session import SessionLocal, engine
from profilequest.main import app

# Wednesday, 12 June 2024, 10:30 UTC
FIXED_NOW = datetime(2024, 6, 12, 10, 30)

FAKE_PNG = b"\x89PNG\r\n\x1a\nfake"


def dicebear_only_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if "dicebear" in request.url.host:
            return httpx.Response(200, content=FAKE_PNG, headers={"content-type": "image/png"})
        return httpx.Response(500)

    return httpx.MockTransport(handler)


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def clock():
    """Mutable clock; tests move it by assigning clock.now."""
    class FixedClock:
        now = FIXED_NOW

        def __call__(self):
            return self.now

    return FixedClock()


@pytest.fixture
def client(clock):
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_generation_service] = lambda: GenerationService(api_key=None)
    app.dependency_overrides[get_avatar_service] = lambda: AvatarService(api_key=None, transport=dicebear_only_transport())
    transport = ASGITransport(app=app)
    yield AsyncClient(transport=transport, base_url="http://test")
    app.dependency_overrides.clear()


async def signup(client, email="hero@example.com", password="s3cret-pass", name="Hero"):
    response = await client.post("/api/auth/signup", json={"email": email, "password": password, "name": name})
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def register():
    """Signs a user up and returns bearer headers."""
    return signup


@pytest.fixture
def fake_png():
    """Bytes served by the stubbed DiceBear endpoint."""
    return FAKE_PNG
