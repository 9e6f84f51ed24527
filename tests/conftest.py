from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from binderbase.api.dependencies import get_edhrec, get_scryfall
from binderbase.db.database import get_session
from binderbase.main import app
from binderbase.models.db import Base
from fakes import FakeEdhrec, FakeScryfall, default_scryfall


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(async_engine) -> AsyncSession:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
def sol_ring_payload() -> dict[str, Any]:
    """Trimmed Scryfall card object for Sol Ring."""
    return {
        "object": "card",
        "id": "4cbc6901-6a4a-4d0a-83ea-7eefa3b35021",
        "name": "Sol Ring",
        "lang": "en",
        "mana_cost": "{1}",
        "cmc": 1.0,
        "type_line": "Artifact",
        "oracle_text": "{T}: Add {C}{C}.",
        "colors": [],
        "color_identity": [],
        "rarity": "uncommon",
        "image_uris": {
            "small": "https://cards.scryfall.io/small/front/sol-ring.jpg",
            "normal": "https://cards.scryfall.io/normal/front/sol-ring.jpg",
        },
    }


@pytest.fixture
def delver_payload() -> dict[str, Any]:
    """Trimmed Scryfall card object for a transforming double-faced card."""
    return {
        "object": "card",
        "id": "28059d09-2c7d-4c61-af55-8942107a7c1f",
        "name": "Delver of Secrets // Insectile Aberration",
        "layout": "transform",
        "cmc": 1.0,
        "type_line": "Creature — Human Wizard // Creature — Human Insect",
        "color_identity": ["U"],
        "card_faces": [
            {
                "name": "Delver of Secrets",
                "mana_cost": "{U}",
                "type_line": "Creature — Human Wizard",
                "colors": ["U"],
                "image_uris": {"normal": "https://cards.scryfall.io/normal/front/delver.jpg"},
            },
            {
                "name": "Insectile Aberration",
                "mana_cost": "",
                "type_line": "Creature — Human Insect",
                "colors": ["U"],
                "image_uris": {"normal": "https://cards.scryfall.io/normal/back/delver.jpg"},
            },
        ],
    }


@pytest.fixture
def fake_scryfall() -> FakeScryfall:
    """Scryfall stand-in knowing a handful of staple cards."""
    return default_scryfall()


@pytest.fixture
def fake_edhrec() -> FakeEdhrec:
    return FakeEdhrec()


@pytest.fixture
async def client(async_engine, fake_scryfall: FakeScryfall, fake_edhrec: FakeEdhrec):
    """Provide an async test client with overridden session and providers."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_scryfall] = lambda: fake_scryfall
    app.dependency_overrides[get_edhrec] = lambda: fake_edhrec

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
