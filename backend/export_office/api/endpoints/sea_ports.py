"""港口管理API"""
import logging
from typing import Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from export_office.core.deps import get_db
from export_office.core.exceptions import ValidationError
from export_office.models import SeaPort
from export_office.schemas.common import ok
from export_office.schemas.reference import SeaPortCreate, SeaPortUpdate, SeaPortResponse

logger = logging.getLogger(__name__)

router = APIRouter()


async def load_port(db: AsyncSession, port_id: int) -> SeaPort:
    result = await db.execute(
        select(SeaPort)
        .options(selectinload(SeaPort.vehicles))
        .where(SeaPort.id == port_id)
        .execution_options(populate_existing=True)
    )
    port = result.scalar_one_or_none()
    if not port:
        raise HTTPException(status_code=404, detail="Sea port not found")
    return port


@router.get("/")
async def list_sea_ports(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    """港口列表（最新在前，含使用该港口的车辆）"""
    result = await db.execute(
        select(SeaPort)
        .options(selectinload(SeaPort.vehicles))
        .order_by(SeaPort.created_at.desc(), SeaPort.id.desc())
    )
    ports = result.scalars().all()
    return ok("Sea ports fetched successfully", [SeaPortResponse.model_validate(p) for p in ports])


@router.post("/", status_code=201)
async def create_sea_port(
    *,
    db: AsyncSession = Depends(get_db),
    port_in: SeaPortCreate) -> Any:
    port = SeaPort(name=port_in.name, location=port_in.location or "")
    db.add(port)
    await db.commit()
    logger.info(f"⚓ 新增港口: {port.name}")

    port = await load_port(db, port.id)
    return ok("Sea port created successfully", SeaPortResponse.model_validate(port))


@router.put("/{port_id}")
async def update_sea_port(
    *,
    db: AsyncSession = Depends(get_db),
    port_id: int,
    port_in: SeaPortUpdate) -> Any:
    port = await load_port(db, port_id)
    for field, value in port_in.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(port, field, value)
    await db.commit()

    port = await load_port(db, port_id)
    return ok("Sea port updated successfully", SeaPortResponse.model_validate(port))


@router.delete("/{port_id}")
async def delete_sea_port(
    *,
    db: AsyncSession = Depends(get_db),
    port_id: int) -> Any:
    """删除港口（仍有车辆使用时拒绝）"""
    port = await load_port(db, port_id)
    count = len(port.vehicles)
    if count:
        raise ValidationError(
            "Sea port is used by vehicles and cannot be deleted", f"{count} vehicle(s) reference this port"
        )

    await db.delete(port)
    await db.commit()
    logger.info(f"🗑️ 删除港口: {port.name}")
    return ok("Sea port deleted successfully")
