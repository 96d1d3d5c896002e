"""
港口代收API

POST 批量保存代收费用；GET 按车辆ID或车架号查询车辆，供代收表单自动填充
"""
import logging
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from export_office.core.deps import get_db
from export_office.core.exceptions import NotFoundError, ValidationError
from export_office.models import PortCollect, Vehicle
from export_office.schemas.common import ok
from export_office.schemas.finance import (
    CollectVehicle, PortCollectCreate, PortCollectResponse, COLLECT_AMOUNT_FIELDS,
)
from export_office.services.ledger import to_decimal

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", status_code=201)
async def create_collects(
    *,
    db: AsyncSession = Depends(get_db),
    collects_in: List[PortCollectCreate]) -> Any:
    """批量保存代收记录（同一事务）"""
    if not collects_in:
        raise ValidationError("At least one collect record is required")

    collects = []
    for collect_in in collects_in:
        total_amount = collect_in.total_amount
        if total_amount is None:
            # 车辆金额 v_amount 不计入代收合计
            total_amount = sum(
                to_decimal(getattr(collect_in, field))
                for field in COLLECT_AMOUNT_FIELDS if field != "v_amount"
            )
        collect = PortCollect(
            **collect_in.model_dump(exclude={"total_amount"}),
            total_amount=total_amount,
        )
        db.add(collect)
        collects.append(collect)

    await db.flush()
    data = [PortCollectResponse.model_validate(c) for c in collects]
    await db.commit()
    logger.info(f"⚓ 保存港口代收 {len(collects)} 条")

    return ok("Collect records saved successfully", data)


@router.get("/")
async def find_collect_vehicle(
    *,
    db: AsyncSession = Depends(get_db),
    query: Optional[str] = Query(None, description="车辆ID或车架号")) -> Any:
    """按车辆ID或车架号查找车辆"""
    if not query or not query.strip():
        raise ValidationError("Query parameter is required")
    query = query.strip()

    conditions = [Vehicle.chassis_no == query]
    if query.isdigit():
        conditions.append(Vehicle.id == int(query))

    result = await db.execute(
        select(Vehicle).where(or_(*conditions)).order_by(Vehicle.id.desc())
    )
    vehicle = result.scalars().first()
    if not vehicle:
        raise NotFoundError("No vehicle found for the given query")

    return ok("Vehicle fetched successfully", CollectVehicle(
        vehicle_id=vehicle.id,
        chassis_no=vehicle.chassis_no or "",
        year=vehicle.year or "",
        color=vehicle.color or "",
        cc=vehicle.engine_type or "N/A",
    ))
