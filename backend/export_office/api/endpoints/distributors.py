"""分销商管理API"""
import logging
from typing import Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from export_office.core.deps import get_db
from export_office.core.exceptions import ValidationError
from export_office.models import Distributor
from export_office.models.invoice import DEFAULT_DISTRIBUTOR_ID
from export_office.schemas.common import ok
from export_office.schemas.reference import (
    DistributorCreate, DistributorUpdate, DistributorResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def load_distributor(db: AsyncSession, distributor_id: int) -> Distributor:
    result = await db.execute(
        select(Distributor)
        .options(selectinload(Distributor.vehicles))
        .where(Distributor.id == distributor_id)
        .execution_options(populate_existing=True)
    )
    distributor = result.scalar_one_or_none()
    if not distributor:
        raise HTTPException(status_code=404, detail="Distributor not found")
    return distributor


@router.get("/")
async def list_distributors(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    result = await db.execute(
        select(Distributor)
        .options(selectinload(Distributor.vehicles))
        .order_by(Distributor.created_at.desc(), Distributor.id.desc())
    )
    distributors = result.scalars().all()
    return ok(
        "Distributors fetched successfully",
        [DistributorResponse.model_validate(d) for d in distributors]
    )


@router.post("/", status_code=201)
async def create_distributor(
    *,
    db: AsyncSession = Depends(get_db),
    distributor_in: DistributorCreate) -> Any:
    distributor = Distributor(name=distributor_in.name, location=distributor_in.location or "")
    db.add(distributor)
    await db.commit()
    logger.info(f"🏢 新增分销商: {distributor.name}")

    distributor = await load_distributor(db, distributor.id)
    return ok("Distributor created successfully", DistributorResponse.model_validate(distributor))


@router.put("/{distributor_id}")
async def update_distributor(
    *,
    db: AsyncSession = Depends(get_db),
    distributor_id: int,
    distributor_in: DistributorUpdate) -> Any:
    distributor = await load_distributor(db, distributor_id)
    for field, value in distributor_in.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(distributor, field, value)
    await db.commit()

    distributor = await load_distributor(db, distributor_id)
    return ok("Distributor updated successfully", DistributorResponse.model_validate(distributor))


@router.delete("/{distributor_id}")
async def delete_distributor(
    *,
    db: AsyncSession = Depends(get_db),
    distributor_id: int) -> Any:
    """删除分销商（默认分销商或仍有车辆归属时拒绝）"""
    distributor = await load_distributor(db, distributor_id)
    if distributor_id == DEFAULT_DISTRIBUTOR_ID:
        raise ValidationError("The default distributor cannot be deleted")

    count = len(distributor.vehicles)
    if count:
        raise ValidationError(
            "Distributor has vehicles and cannot be deleted", f"{count} vehicle(s) reference this distributor"
        )

    await db.delete(distributor)
    await db.commit()
    logger.info(f"🗑️ 删除分销商: {distributor.name}")
    return ok("Distributor deleted successfully")
