"""内陆运输API"""
import logging
from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from export_office.core.deps import get_db
from export_office.core.exceptions import NotFoundError
from export_office.models import Transport, Vehicle
from export_office.models.invoice import VEHICLE_TRANSPORT
from export_office.schemas.common import ok
from export_office.schemas.logistics import (
    TransportCreate, TransportResponse, TransportWithVehicles, TransportVehicleResponse,
)
from export_office.services.vehicle_flow import TRANSPORT_FROM, ensure_status, move_to

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", status_code=201)
async def create_transports(
    *,
    db: AsyncSession = Depends(get_db),
    transport_in: TransportCreate) -> Any:
    """批量登记运输，带车辆ID的同时把车辆状态改为 Transport"""
    transports = []
    for index, item in enumerate(transport_in.vehicles):
        if item.id:
            vehicle = await db.get(Vehicle, item.id)
            if not vehicle:
                raise NotFoundError(
                    f"Vehicle at index {index} not found", f"Vehicle {item.id} does not exist"
                )
            ensure_status(vehicle, TRANSPORT_FROM, "transported")
            move_to(vehicle, VEHICLE_TRANSPORT)
        else:
            logger.warning(f"运输记录 {item.vehicle_no} 未带车辆ID，跳过状态更新")

        transport = Transport(
            vehicle_no=item.vehicle_no,
            date=transport_in.date,
            delivery_date=item.delivery_date,
            port=item.port or "",
            company=transport_in.company,
            fee=item.fee,
            fee_dollar=item.fee_dollar,
            image_path=transport_in.image_path or "",
            added_by=transport_in.added_by,
        )
        db.add(transport)
        transports.append(transport)

    await db.flush()
    data = [TransportResponse.model_validate(t) for t in transports]
    await db.commit()
    logger.info(f"🚚 登记运输 {len(transports)} 台: {transport_in.company}")

    return ok("Transports created successfully and vehicle statuses updated where applicable", data)


@router.get("/")
async def list_transports(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    """运输记录（最新在前），按车架号关联车辆及其装箱明细"""
    result = await db.execute(
        select(Transport).order_by(Transport.created_at.desc(), Transport.id.desc())
    )
    transports = result.scalars().all()

    vehicle_nos = {t.vehicle_no for t in transports}
    vehicles_by_no = {}
    if vehicle_nos:
        vehicle_result = await db.execute(
            select(Vehicle)
            .options(selectinload(Vehicle.images), selectinload(Vehicle.container_items))
            .where(Vehicle.chassis_no.in_(vehicle_nos))
            .order_by(Vehicle.id)
        )
        for vehicle in vehicle_result.scalars().all():
            vehicles_by_no.setdefault(vehicle.chassis_no, []).append(vehicle)

    data = []
    for transport in transports:
        item = TransportWithVehicles.model_validate(transport)
        item.vehicles = [
            TransportVehicleResponse.model_validate(v)
            for v in vehicles_by_no.get(transport.vehicle_no, [])
        ]
        data.append(item)
    return ok("Transports fetched successfully", data)
