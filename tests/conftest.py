"""Shared pytest fixtures for stockroom tests."""

import json
from io import BytesIO
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from stockroom.config import Settings, load_settings
from stockroom.core.permissions import Permission
from stockroom.db.schema import Base, Option, User

API_URL = "https://api.shutterstock.test/v2"

ROLE_PERMISSIONS = {
    "administrator": [Permission.LICENSE_ALL.value],
    "editor": [Permission.LICENSE_STANDARD.value],
    "photo_editor": [Permission.LICENSE_EDITORIAL.value],
    "subscriber": [],
}

# token -> (login, roles)
USERS = {
    "admin-token": ("admin", ["administrator"]),
    "editor-token": ("editor", ["editor"]),
    "photo-token": ("photo", ["photo_editor"]),
    "subscriber-token": ("subscriber", ["subscriber"]),
}


def make_jpeg(width: int, height: int, color: str = "navy") -> bytes:
    """Create JPEG bytes of the given size."""
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    """Create a database session for testing."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at temporary storage and a fake vendor URL."""
    return load_settings(
        {
            "STOCKROOM_DB_PATH": str(tmp_path / "stockroom.db"),
            "STOCKROOM_UPLOADS_DIR": str(tmp_path / "uploads"),
            "STOCKROOM_UPLOADS_URL": "/uploads",
            "STOCKROOM_API_URL": API_URL,
            "STOCKROOM_PLATFORM": "Stockroom",
            "STOCKROOM_VERSION": "1.2.3",
        }
    )


@pytest.fixture
def seeded_engine(engine, settings):
    """Engine with a site token, the role table and one user per role."""
    with Session(engine) as session:
        session.add(
            Option(
                scope="site",
                name=settings.option_name,
                value_json=json.dumps(
                    {"app_token": "vendor-token", "user_settings": ROLE_PERMISSIONS}
                ),
            )
        )
        for token, (login, roles) in USERS.items():
            session.add(User(login=login, access_token=token, roles_json=json.dumps(roles)))
        session.commit()
    return engine


class FakeVendor:
    """Answers vendor and download requests from a route table.

    Routes map (method, path) to an httpx.Response or to an exception
    to raise. Every request is recorded.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], object] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, response) -> None:
        self.routes[(method, path)] = response

    def add_json(self, method: str, path: str, body, status_code: int = 200) -> None:
        self.add(method, path, httpx.Response(status_code, json=body))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get((request.method, request.url.path))
        if response is None:
            return httpx.Response(404, json={"message": "Not found"})
        if isinstance(response, Exception):
            raise response
        return response

    def find(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def vendor() -> FakeVendor:
    return FakeVendor()


@pytest.fixture
def client(seeded_engine, settings, vendor) -> TestClient:
    """TestClient with test database and fake vendor wired in."""
    from stockroom.api.app import create_app, get_db_session, get_http_client

    app = create_app(settings, init_database=False)

    def override_get_db():
        with Session(seeded_engine) as session:
            yield session

    def override_get_http():
        with vendor.client() as http:
            yield http

    app.dependency_overrides[get_db_session] = override_get_db
    app.dependency_overrides[get_http_client] = override_get_http
    return TestClient(app)
