"""
车辆查询API

车辆随发票创建，状态由运输 / 验车 / 订舱 / 销售环节更新，这里只提供查询
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from export_office.core.deps import get_db
from export_office.core.exceptions import ValidationError
from export_office.models import Vehicle, Transport
from export_office.models.invoice import VEHICLE_STATUSES
from export_office.schemas.common import ok
from export_office.schemas.invoice import VehicleDetailResponse
from export_office.schemas.logistics import VehicleFullResponse, TransportResponse

router = APIRouter()


@router.get("/")
async def list_vehicles(
    *,
    db: AsyncSession = Depends(get_db),
    status: Optional[str] = Query(None, description="按状态筛选")) -> Any:
    """车辆列表（含分销商、港口、图片）"""
    query = select(Vehicle).options(
        selectinload(Vehicle.distributor),
        selectinload(Vehicle.sea_port),
        selectinload(Vehicle.images),
    )
    if status:
        if status not in VEHICLE_STATUSES:
            raise ValidationError(f"Invalid vehicle status: {status}", f"Expected one of: {', '.join(VEHICLE_STATUSES)}")
        query = query.where(Vehicle.status == status)

    result = await db.execute(query.order_by(Vehicle.id.desc()))
    vehicles = result.scalars().all()

    if not vehicles:
        return ok("No vehicles found", [])
    return ok(
        "Vehicles fetched successfully",
        [VehicleDetailResponse.model_validate(v) for v in vehicles]
    )


@router.get("/{vehicle_id}")
async def get_vehicle(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_id: int) -> Any:
    """车辆详情（运输记录按车架号匹配）"""
    result = await db.execute(
        select(Vehicle)
        .options(
            selectinload(Vehicle.distributor),
            selectinload(Vehicle.sea_port),
            selectinload(Vehicle.images),
            selectinload(Vehicle.container_items),
        )
        .where(Vehicle.id == vehicle_id)
    )
    vehicle = result.scalar_one_or_none()
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")

    response = VehicleFullResponse.model_validate(vehicle)
    if vehicle.chassis_no:
        transports = await db.execute(
            select(Transport)
            .where(Transport.vehicle_no == vehicle.chassis_no)
            .order_by(Transport.date.desc(), Transport.id.desc())
        )
        response.transports = [TransportResponse.model_validate(t) for t in transports.scalars().all()]
    return ok("Vehicle fetched successfully", response)
