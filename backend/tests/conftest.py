"""测试夹具：内存 SQLite + ASGI 客户端"""
import os

# 导入应用前关闭定时任务
os.environ.setdefault("AUTO_BACKUP_ENABLED", "false")
os.environ.setdefault("EXCHANGE_RATE_REFRESH_ENABLED", "false")
os.environ.setdefault("EXCHANGE_RATE_API_KEY", "")

import httpx
import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from export_office.core.deps import get_db
from export_office.db.base import Base
from export_office.db.init_db import ensure_base_data
from export_office.main import app
from export_office.models import Admin, SeaPort
from export_office.services.currency import rate_cache


@pytest.fixture
def anyio_backend():
    return "asyncio"


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
async def session_factory(engine):
    factory = sessionmaker(engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)
    async with factory() as session:
        await ensure_base_data(session)
    return factory


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clear_rate_cache():
    rate_cache.clear()
    yield
    rate_cache.clear()


@pytest.fixture
async def admin_id(session_factory):
    """默认管理员 admin 的ID"""
    async with session_factory() as session:
        result = await session.execute(select(Admin.id).where(Admin.username == "admin"))
        return result.scalar_one()


@pytest.fixture
async def port_id(session_factory):
    async with session_factory() as session:
        port = SeaPort(name="Yokohama", location="Kanagawa")
        session.add(port)
        await session.commit()
        return port.id
