"""出口验车API"""
import logging
from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from export_office.core.deps import get_db
from export_office.core.exceptions import NotFoundError
from export_office.models import Inspection, Vehicle
from export_office.models.invoice import VEHICLE_INSPECTION
from export_office.schemas.common import ok
from export_office.schemas.invoice import VehicleResponse
from export_office.schemas.logistics import (
    InspectionCreate, InspectionResponse, InspectionWithVehicle,
)
from export_office.services.vehicle_flow import INSPECTION_FROM, ensure_status, move_to

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", status_code=201)
async def create_inspections(
    *,
    db: AsyncSession = Depends(get_db),
    inspection_in: InspectionCreate) -> Any:
    """
    批量登记验车

    每台车一条验车记录；带车辆ID的同时把车辆状态改为 Inspection
    """
    inspections = []
    for index, item in enumerate(inspection_in.vehicles):
        if item.id:
            vehicle = await db.get(Vehicle, item.id)
            if not vehicle:
                raise NotFoundError(
                    f"Vehicle at index {index} not found", f"Vehicle {item.id} does not exist"
                )
            ensure_status(vehicle, INSPECTION_FROM, "inspected")
            move_to(vehicle, VEHICLE_INSPECTION)
        else:
            logger.warning(f"验车记录 {item.vehicle_no} 未带车辆ID，跳过状态更新")

        inspection = Inspection(
            vehicle_no=item.vehicle_no,
            company=inspection_in.company,
            date=inspection_in.date,
            amount=item.amount,
            amount_dollar=item.amount_dollar,
            image_path=inspection_in.image_path or "",
            added_by=inspection_in.added_by,
        )
        db.add(inspection)
        inspections.append(inspection)

    await db.flush()
    data = [InspectionResponse.model_validate(i) for i in inspections]
    await db.commit()
    logger.info(f"🔍 登记验车 {len(inspections)} 台: {inspection_in.company}")

    return ok("Inspections created successfully and vehicle statuses updated where applicable", data)


@router.get("/")
async def list_inspections(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    """验车记录（最新在前），按车架号关联车辆"""
    result = await db.execute(
        select(Inspection).order_by(Inspection.created_at.desc(), Inspection.id.desc())
    )
    inspections = result.scalars().all()

    vehicle_nos = {i.vehicle_no for i in inspections}
    vehicles = {}
    if vehicle_nos:
        vehicle_result = await db.execute(
            select(Vehicle)
            .options(selectinload(Vehicle.images))
            .where(Vehicle.chassis_no.in_(vehicle_nos))
            .order_by(Vehicle.id)
        )
        vehicles = {v.chassis_no: v for v in vehicle_result.scalars().all()}

    data = []
    for inspection in inspections:
        item = InspectionWithVehicle.model_validate(inspection)
        vehicle = vehicles.get(inspection.vehicle_no)
        item.vehicle = VehicleResponse.model_validate(vehicle) if vehicle else None
        data.append(item)
    return ok("Inspections fetched successfully", data)
