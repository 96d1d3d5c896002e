import asyncio
import logging
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from export_office.db.session import engine, SessionLocal
from export_office.db.base import Base

# 导入所有模型，确保表能被创建
from export_office.models import Admin, Distributor

logger = logging.getLogger(__name__)


async def ensure_tables_exist() -> None:
    """
    确保数据库表存在（应用启动时调用）
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ensure_base_data(db: AsyncSession) -> dict:
    """
    确保基础数据存在：
    - 默认分销商（车辆未指定分销商时归入 ID=1）
    - 默认管理员 admin
    """
    created = []

    distributor_count = (await db.execute(select(func.count(Distributor.id)))).scalar() or 0
    if distributor_count == 0:
        db.add(Distributor(id=1, name="Default", location=""))
        created.append("distributor:Default")

    admin = (await db.execute(select(Admin).where(Admin.username == "admin"))).scalar_one_or_none()
    if not admin:
        db.add(Admin(fullname="Administrator", username="admin", role="admin"))
        created.append("admin:admin")

    if created:
        await db.commit()
    return {"created": created}


async def init_db() -> None:
    """
    初始化数据库 - 创建所有表并写入基础数据
    """
    await ensure_tables_exist()
    async with SessionLocal() as db:
        result = await ensure_base_data(db)
    logger.info(f"数据库初始化完成: {result}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(init_db())
