"""
集装箱订舱API

一张订舱单 = 一条提单信息 + 若干装箱明细（每行一台车），
保存后相关车辆状态更新为 Shipped
"""
import logging
from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from export_office.core.deps import get_db
from export_office.core.exceptions import DuplicateError, NotFoundError, ValidationError
from export_office.models import ContainerBooking, ContainerDetail, ContainerItemDetail, Vehicle
from export_office.models.invoice import VEHICLE_SHIPPED
from export_office.schemas.cargo import ContainerBookingCreate, ContainerBookingResponse
from export_office.schemas.common import ok
from export_office.services.audit import create_audit_log
from export_office.services.vehicle_flow import SHIPPING_FROM, ensure_status, move_to

logger = logging.getLogger(__name__)

router = APIRouter()

BOOKING_FIELDS = (
    "booking_no", "actual_shipper", "cy_open", "cy_cut_off", "etd", "eta", "volume",
    "carrier", "vessel", "port_of_loading", "port_of_discharge", "cargo_mode",
    "place_of_issue", "freight_term", "shipper_name", "consignee", "description_of_goods",
    "container_quantity", "numbers", "image_path", "added_by",
)


def booking_query():
    return select(ContainerBooking).options(
        selectinload(ContainerBooking.container_details),
        selectinload(ContainerBooking.container_items)
        .selectinload(ContainerItemDetail.vehicle)
        .selectinload(Vehicle.images),
    )


@router.post("/", status_code=201)
async def create_booking(
    *,
    db: AsyncSession = Depends(get_db),
    booking_in: ContainerBookingCreate) -> Any:
    """创建订舱单（提单信息 + 装箱明细），并把车辆状态改为 Shipped"""
    if not booking_in.container_item_details:
        raise ValidationError("Missing required fields (booking_no, container_item_details)")
    if len(booking_in.container_details) != 1:
        raise ValidationError("Exactly one ContainerDetail entry is required")

    existing = await db.execute(
        select(ContainerBooking.id).where(ContainerBooking.booking_no == booking_in.booking_no)
    )
    if existing.scalar():
        raise DuplicateError(
            "A booking with this number already exists", f"Duplicate booking_no {booking_in.booking_no}"
        )

    booking = ContainerBooking(**booking_in.model_dump(include=set(BOOKING_FIELDS)))
    db.add(booking)
    await db.flush()

    detail_in = booking_in.container_details[0]
    db.add(ContainerDetail(
        booking_id=booking.id,
        added_by=booking.added_by,
        **detail_in.model_dump()
    ))

    for index, item in enumerate(booking_in.container_item_details):
        vehicle = await db.get(Vehicle, item.vehicle_id)
        if not vehicle:
            raise NotFoundError(
                f"Vehicle for container item at index {index} not found",
                f"Vehicle {item.vehicle_id} does not exist"
            )
        ensure_status(vehicle, SHIPPING_FROM, "shipped")

        # 明细未填的车辆信息取自车辆本身
        db.add(ContainerItemDetail(
            booking_id=booking.id,
            vehicle_id=vehicle.id,
            item_no=item.item_no or str(index + 1),
            chassis_no=item.chassis_no or vehicle.chassis_no,
            year=item.year or vehicle.year,
            color=item.color or vehicle.color,
            cc=item.cc or vehicle.engine_type,
            amount=item.amount,
        ))
        move_to(vehicle, VEHICLE_SHIPPED)

    create_audit_log(
        db, booking.added_by or None, "create", "cargo",
        resource_id=booking.id,
        resource_name=booking.booking_no,
        description=f"Booked {len(booking_in.container_item_details)} vehicle(s) on {booking.vessel or 'vessel'}",
        new_value={"vehicle_ids": [i.vehicle_id for i in booking_in.container_item_details]}
    )
    await db.commit()

    result = await db.execute(
        booking_query()
        .where(ContainerBooking.id == booking.id)
        .execution_options(populate_existing=True)
    )
    booking = result.scalar_one()
    logger.info(f"🚢 订舱 {booking.booking_no}: {len(booking.container_items)} 台车已装箱")

    return ok(
        "Cargo booking created successfully and vehicle statuses updated",
        ContainerBookingResponse.model_validate(booking)
    )


@router.get("/")
async def list_bookings(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    """订舱单列表（含提单信息、装箱明细及车辆）"""
    result = await db.execute(booking_query().order_by(ContainerBooking.id.desc()))
    bookings = result.scalars().all()
    return ok(
        "Cargo bookings fetched successfully",
        [ContainerBookingResponse.model_validate(b) for b in bookings]
    )
