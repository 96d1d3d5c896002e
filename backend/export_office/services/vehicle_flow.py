"""车辆状态流转

Pending → Transport → Inspection → Shipped → Sold
"""
import logging
from typing import Iterable

from export_office.core.exceptions import ValidationError
from export_office.models.invoice import (
    Vehicle,
    VEHICLE_PENDING, VEHICLE_TRANSPORT, VEHICLE_INSPECTION, VEHICLE_SHIPPED, VEHICLE_SOLD,
)

logger = logging.getLogger(__name__)

# 各环节允许的前置状态
TRANSPORT_FROM = (VEHICLE_PENDING, VEHICLE_TRANSPORT)
INSPECTION_FROM = (VEHICLE_TRANSPORT,)
SHIPPING_FROM = (VEHICLE_TRANSPORT, VEHICLE_INSPECTION)
SALE_FROM = (VEHICLE_PENDING, VEHICLE_TRANSPORT, VEHICLE_INSPECTION, VEHICLE_SHIPPED)


def ensure_status(vehicle: Vehicle, allowed: Iterable[str], action: str) -> None:
    """检查车辆当前状态是否允许进入下一环节"""
    allowed = tuple(allowed)
    if vehicle.status not in allowed:
        raise ValidationError(
            f"Vehicle {vehicle.chassis_no or vehicle.id} cannot be {action}",
            f"Status is {vehicle.status}, expected one of: {', '.join(allowed)}"
        )


def move_to(vehicle: Vehicle, status: str) -> None:
    """更新车辆状态"""
    if vehicle.status != status:
        logger.info(f"🚗 车辆 {vehicle.chassis_no or vehicle.id}: {vehicle.status} → {status}")
    vehicle.status = status


def ensure_not_sold(vehicle: Vehicle) -> None:
    if vehicle.status == VEHICLE_SOLD:
        raise ValidationError(f"Vehicle {vehicle.chassis_no} is already sold")
