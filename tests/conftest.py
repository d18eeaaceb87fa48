"""Shared pytest fixtures."""

from dataclasses import dataclass
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
import yaml
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from sacristy.db import models  # noqa: F401
from sacristy.db.base import Base
from sacristy.lib.theme import theme_context


@pytest.fixture
def temp_app_yaml(tmp_path):
    """Create a temporary app.yaml file for testing."""
    config_path = tmp_path / "app.yaml"

    def _create_config(config: dict):
        with open(config_path, "w") as f:
            yaml.safe_dump(config, f)
        return config_path

    return _create_config


@pytest.fixture
def mock_request_factory():
    """Factory fixture that returns mock requests with a session dict."""
    def _make(session=None, form_data=None):
        request = MagicMock()
        request.session = session if session is not None else {}
        if form_data is not None:
            async def _form():
                return form_data
            request.form = _form
        return request
    return _make


@pytest_asyncio.fixture
async def db_session():
    """A session on a fresh in-memory SQLite database with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(engine, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest.fixture(autouse=True)
def reset_theme_context():
    """Start every test with an empty theme cache."""
    theme_context.invalidate()
    yield
    theme_context.invalidate()


@dataclass
class FakeUpload:
    """Stand-in for ``litestar.datastructures.UploadFile``."""

    filename: str
    content_type: str
    data: bytes

    async def read(self, size: int = -1) -> bytes:
        return self.data


@pytest.fixture
def make_upload():
    def _make(filename="photo.jpg", content_type="image/jpeg", size=1024):
        return FakeUpload(filename, content_type, b"\xff" * size)
    return _make
