import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from app.db.session import Base, get_db
from app.main import app


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def client(engine):
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def as_member(member_id):
    return {"X-Member-Id": member_id}


async def make_group(client, creator="alice", members=("bob", "carol")):
    resp = await client.post("/api/v1/groups/", json={"name": "Trip"}, headers=as_member(creator))
    assert resp.status_code == 201
    group = resp.json()

    for m in members:
        r = await client.post(
            f"/api/v1/groups/{group['id']}/members",
            json={"member_id": m},
            headers=as_member(creator),
        )
        assert r.status_code == 201

    return group
