"""Pytest configuration and fixtures."""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from floorplan.database import get_session
from floorplan.main import app
from floorplan.models import Asset, AssetType, Base, Floor, FloorItem
from floorplan.services.cache_gateway import CacheGateway
from floorplan.services.staging_store import StagingStore, get_staging_store

DESK_ICON = '{"type": "desk", "elements": [{"type": "rect", "x": -50, "y": -30, "width": 100, "height": 60}]}'


@pytest_asyncio.fixture
async def db_session():
    """Create an in-memory test database session."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session_factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def store(tmp_path) -> StagingStore:
    return StagingStore(tmp_path / "offline")


@pytest.fixture
def gateway(db_session, store) -> CacheGateway:
    return CacheGateway(db_session, store)


@pytest_asyncio.fixture
async def client(db_session, store):
    """Async test client bound to the test database and staging directory."""

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_staging_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def desk_type(db_session) -> AssetType:
    asset_type = AssetType(id="type-desk", name="Desk", icon_definition=DESK_ICON)
    db_session.add(asset_type)
    await db_session.commit()
    return asset_type


@pytest_asyncio.fixture
async def office(db_session, desk_type):
    """Two durable floors: floor-1 with two desks, floor-2 with one chair."""
    floor_1 = Floor(
        id="floor-1",
        name="Main Office",
        width=1000,
        height=600,
        items=[
            FloorItem(id="desk-1", type="Desk", pos_x=150, pos_y=150, label="Desk 1", assigned_to="1"),
            FloorItem(id="desk-2", type="Desk", pos_x=350, pos_y=150, label="Desk 2", assigned_to="2"),
        ],
    )
    floor_2 = Floor(
        id="floor-2",
        name="Conference Area",
        width=800,
        height=500,
        items=[FloorItem(id="chair-21", type="Chair", pos_x=420, pos_y=240, rotation=180)],
    )
    db_session.add_all([floor_1, floor_2])
    await db_session.commit()
    return floor_1, floor_2


@pytest_asyncio.fixture
async def assigned_desk(db_session, desk_type) -> Asset:
    asset = Asset(id="asset-1", label="Corner Desk", assigned_to="3", asset_type_id=desk_type.id)
    db_session.add(asset)
    await db_session.commit()
    return asset


async def count_rows(session: AsyncSession, model) -> int:
    return await session.scalar(select(func.count()).select_from(model))


def by_id(records, record_id):
    return next(r for r in records if r.id == record_id)
