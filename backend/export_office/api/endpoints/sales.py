"""车辆销售API"""
import logging
from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from export_office.core.deps import get_db
from export_office.core.exceptions import NotFoundError
from export_office.models import Admin, SaleVehicle, Vehicle
from export_office.models.invoice import VEHICLE_SOLD
from export_office.schemas.common import ok
from export_office.schemas.finance import SaleCreate, SaleResponse
from export_office.services.audit import create_audit_log
from export_office.services.ledger import to_decimal
from export_office.services.vehicle_flow import ensure_not_sold, move_to

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", status_code=201)
async def create_sale(
    *,
    db: AsyncSession = Depends(get_db),
    sale_in: SaleCreate) -> Any:
    """登记销售，同时把车辆状态改为 Sold"""
    if not await db.get(Admin, sale_in.admin_id):
        raise NotFoundError("Admin not found")

    result = await db.execute(
        select(Vehicle).where(Vehicle.chassis_no == sale_in.vehicle_no).order_by(Vehicle.id.desc())
    )
    vehicle = result.scalars().first()
    if not vehicle:
        raise NotFoundError(f"Vehicle with vehicle_no {sale_in.vehicle_no} not found")
    ensure_not_sold(vehicle)

    total_amount = sale_in.total_amount
    if total_amount is None:
        total_amount = (
            to_decimal(sale_in.sale_price)
            + to_decimal(sale_in.commission_amount)
            + to_decimal(sale_in.other_charges)
        )

    sale = SaleVehicle(**sale_in.model_dump(exclude={"total_amount"}), total_amount=total_amount)
    db.add(sale)
    move_to(vehicle, VEHICLE_SOLD)
    await db.flush()

    create_audit_log(
        db, sale.admin_id, "create", "sale",
        resource_id=sale.id,
        resource_name=sale.vehicle_no,
        description=f"Sold vehicle {sale.vehicle_no} to {sale.fullname or 'buyer'}",
        new_value={"sale_price": sale_in.sale_price, "total_amount": float(total_amount)}
    )
    await db.commit()
    await db.refresh(sale)
    logger.info(f"🤝 车辆 {sale.vehicle_no} 已售出: {sale.total_amount}")

    return ok(
        "Sale vehicle saved successfully and vehicle status updated to Sold",
        SaleResponse.model_validate(sale)
    )


@router.get("/")
async def list_sales(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    result = await db.execute(
        select(SaleVehicle).order_by(SaleVehicle.created_at.desc(), SaleVehicle.id.desc())
    )
    sales = result.scalars().all()
    return ok("Sales fetched successfully", [SaleResponse.model_validate(s) for s in sales])
