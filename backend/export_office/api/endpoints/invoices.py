"""
发票管理API

创建发票在一个事务内完成：
1. 写入发票
2. 写入车辆明细（未传合计金额时按汇率计算）
3. 写入车辆图片（同一车辆的重复图片跳过）
4. 发票状态为 PAID 时从录入人流水账扣款，余额不足则全部回滚
"""
import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from export_office.core.deps import get_db
from export_office.core.exceptions import DuplicateError, NotFoundError, ValidationError
from export_office.models import Admin, Distributor, Invoice, Vehicle, VehicleImage, SeaPort
from export_office.models.invoice import (
    INVOICE_PAID, INVOICE_UNPAID, VEHICLE_PENDING, DEFAULT_DISTRIBUTOR_ID,
)
from export_office.schemas.common import ok
from export_office.schemas.invoice import (
    AMOUNT_FIELDS, InvoiceCreate, InvoiceUpdate, InvoiceResponse, InvoiceCreateResult,
    VehicleCreate, VehicleDetailResponse,
)
from export_office.services.audit import create_audit_log
from export_office.services.currency import compute_vehicle_totals, yen_to_usd
from export_office.services.ledger import post_invoice_payment

logger = logging.getLogger(__name__)

router = APIRouter()


async def require_json_body(request: Request) -> None:
    """创建发票只接受 JSON 请求体"""
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("application/json"):
        raise HTTPException(status_code=400, detail="Content-Type must be 'application/json'")


def invoice_query():
    """发票查询（预加载车辆及图片）"""
    return select(Invoice).options(
        selectinload(Invoice.vehicles).selectinload(Vehicle.images)
    )


async def load_invoice(db: AsyncSession, invoice_id: int, refresh: bool = False) -> Optional[Invoice]:
    query = invoice_query().where(Invoice.id == invoice_id)
    if refresh:
        query = query.execution_options(populate_existing=True)
    result = await db.execute(query)
    return result.scalar_one_or_none()


def payment_distributor(vehicles: List[Vehicle]) -> int:
    """付款流水归属第一台车的分销商"""
    if vehicles and vehicles[0].distributor_id:
        return vehicles[0].distributor_id
    return DEFAULT_DISTRIBUTOR_ID


def build_vehicle(invoice: Invoice, vehicle_in: VehicleCreate, rate: Optional[float]) -> Vehicle:
    """由请求数据构建车辆，未传入的合计金额由服务端计算"""
    totals = compute_vehicle_totals(
        **{field: getattr(vehicle_in, field) for field in AMOUNT_FIELDS}, rate=rate
    )
    for field in totals:
        given = getattr(vehicle_in, field)
        if given is not None:
            totals[field] = given

    data = vehicle_in.model_dump(exclude={
        "invoice_no", "auction_house", "distributor_id", "status", "vehicle_images",
        "ten_percent_add", "total_amount_yen", "total_amount_dollars",
    })
    return Vehicle(
        **data,
        **totals,
        invoice_id=invoice.id,
        invoice_no=vehicle_in.invoice_no or str(invoice.number),
        auction_house=vehicle_in.auction_house or invoice.auction_house,
        distributor_id=vehicle_in.distributor_id or DEFAULT_DISTRIBUTOR_ID,
        status=vehicle_in.status or VEHICLE_PENDING,
        added_by=invoice.added_by,
    )


@router.post("/", dependencies=[Depends(require_json_body)])
async def create_invoice(
    *,
    db: AsyncSession = Depends(get_db),
    invoice_in: InvoiceCreate) -> Any:
    """创建发票及其车辆明细"""
    existing = await db.execute(select(Invoice.id).where(Invoice.number == invoice_in.number))
    if existing.scalar():
        raise DuplicateError("An invoice with this number already exists", "Duplicate invoice number")

    if not await db.get(Admin, invoice_in.added_by):
        raise NotFoundError("Admin not found")

    for index, vehicle_in in enumerate(invoice_in.vehicles):
        if not await db.get(SeaPort, vehicle_in.sending_port_id):
            raise ValidationError(
                f"Invalid sending_port for vehicle at index {index}",
                f"Sea port {vehicle_in.sending_port_id} does not exist"
            )
        if vehicle_in.distributor_id and not await db.get(Distributor, vehicle_in.distributor_id):
            raise ValidationError(
                f"Invalid distributor for vehicle at index {index}",
                f"Distributor {vehicle_in.distributor_id} does not exist"
            )

    rate = invoice_in.exchange_rate
    amount_dollar = invoice_in.amount_dollar
    if amount_dollar is None:
        amount_dollar = yen_to_usd(invoice_in.amount_yen, rate)

    invoice = Invoice(
        date=invoice_in.date,
        number=invoice_in.number,
        status=invoice_in.status,
        auction_house=invoice_in.auction_house,
        image_path=invoice_in.image_path,
        amount_yen=invoice_in.amount_yen,
        amount_dollar=amount_dollar,
        added_by=invoice_in.added_by,
    )
    db.add(invoice)
    await db.flush()

    vehicles = []
    for vehicle_in in invoice_in.vehicles:
        vehicle = build_vehicle(invoice, vehicle_in, rate)
        db.add(vehicle)
        await db.flush()

        seen = set()
        for image_path in vehicle_in.vehicle_images:
            if not image_path or image_path in seen:
                continue
            seen.add(image_path)
            db.add(VehicleImage(vehicle_id=vehicle.id, image_path=image_path))
        vehicles.append(vehicle)

    if invoice.status == INVOICE_PAID:
        await post_invoice_payment(db, invoice, payment_distributor(vehicles))

    create_audit_log(
        db, invoice.added_by, "create", "invoice",
        resource_id=invoice.id,
        resource_name=str(invoice.number),
        description=f"Created invoice #{invoice.number} with {len(vehicles)} vehicle(s)",
        new_value={"status": invoice.status, "amount_dollar": float(amount_dollar)}
    )
    await db.commit()

    invoice = await load_invoice(db, invoice.id, refresh=True)
    logger.info(f"🧾 创建发票 #{invoice.number}: {len(invoice.vehicles)} 台车, 状态 {invoice.status}")

    invoice_data = InvoiceResponse.model_validate(invoice)
    return ok(
        "Invoice and vehicles created successfully",
        InvoiceCreateResult(invoice=invoice_data, vehicles=invoice_data.vehicles)
    )


@router.get("/")
async def list_invoices(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    """发票列表（含车辆及图片）"""
    result = await db.execute(invoice_query().order_by(Invoice.id.desc()))
    invoices = result.scalars().all()
    return ok(
        "Invoices fetched successfully",
        [InvoiceResponse.model_validate(invoice) for invoice in invoices]
    )


@router.get("/vehicle-search/{chassis_no}")
async def search_vehicle(
    *,
    db: AsyncSession = Depends(get_db),
    chassis_no: str) -> Any:
    """按车架号查询车辆（含图片、港口、分销商）"""
    result = await db.execute(
        select(Vehicle)
        .options(
            selectinload(Vehicle.images),
            selectinload(Vehicle.sea_port),
            selectinload(Vehicle.distributor),
        )
        .where(Vehicle.chassis_no == chassis_no)
        .order_by(Vehicle.id.desc())
    )
    vehicle = result.scalars().first()
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return ok("Vehicle fetched successfully", VehicleDetailResponse.model_validate(vehicle))


@router.get("/{invoice_id}")
async def get_invoice(
    *,
    db: AsyncSession = Depends(get_db),
    invoice_id: int) -> Any:
    invoice = await load_invoice(db, invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return ok("Invoice fetched successfully", InvoiceResponse.model_validate(invoice))


@router.put("/{invoice_id}")
async def update_invoice(
    *,
    db: AsyncSession = Depends(get_db),
    invoice_id: int,
    invoice_in: InvoiceUpdate) -> Any:
    """
    更新发票

    UNPAID → PAID 时扣款（同样检查余额），已付款发票不能改回 UNPAID
    """
    invoice = await load_invoice(db, invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")

    update_data = invoice_in.model_dump(exclude_unset=True, exclude_none=True)
    new_status = update_data.pop("status", invoice.status)
    old_status = invoice.status

    if old_status == INVOICE_PAID and new_status == INVOICE_UNPAID:
        raise ValidationError("A paid invoice cannot be set back to UNPAID")

    for field, value in update_data.items():
        setattr(invoice, field, value)

    if old_status == INVOICE_UNPAID and new_status == INVOICE_PAID:
        invoice.status = INVOICE_PAID
        await post_invoice_payment(db, invoice, payment_distributor(invoice.vehicles))
        create_audit_log(
            db, invoice.added_by, "payment", "invoice",
            resource_id=invoice.id,
            resource_name=str(invoice.number),
            description=f"Invoice #{invoice.number} paid",
            new_value={"amount_dollar": float(invoice.amount_dollar or 0)}
        )
        logger.info(f"🧾 发票 #{invoice.number}: {old_status} → {INVOICE_PAID}")
    elif update_data:
        create_audit_log(
            db, invoice.added_by, "update", "invoice",
            resource_id=invoice.id,
            resource_name=str(invoice.number),
            description=f"Updated invoice #{invoice.number}",
            new_value={k: str(v) for k, v in update_data.items()}
        )

    await db.commit()
    invoice = await load_invoice(db, invoice_id, refresh=True)
    return ok("Invoice updated successfully", InvoiceResponse.model_validate(invoice))


@router.delete("/{invoice_id}")
async def delete_invoice(
    *,
    db: AsyncSession = Depends(get_db),
    invoice_id: int) -> Any:
    """删除未付款发票（连同车辆及图片）"""
    result = await db.execute(
        select(Invoice)
        .options(
            selectinload(Invoice.vehicles).selectinload(Vehicle.images),
            selectinload(Invoice.vehicles).selectinload(Vehicle.container_items),
        )
        .where(Invoice.id == invoice_id)
    )
    invoice = result.scalar_one_or_none()
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    if invoice.status != INVOICE_UNPAID:
        raise ValidationError("Only UNPAID invoices can be deleted")

    moved = [v for v in invoice.vehicles if v.status != VEHICLE_PENDING]
    if moved:
        raise ValidationError(
            "Invoice vehicles are already in progress",
            f"Vehicles not Pending: {', '.join(v.chassis_no or str(v.id) for v in moved)}"
        )

    number = invoice.number
    await db.delete(invoice)
    create_audit_log(
        db, invoice.added_by, "delete", "invoice",
        resource_id=invoice_id,
        resource_name=str(number),
        description=f"Deleted invoice #{number}"
    )
    await db.commit()
    logger.info(f"🗑️ 删除发票 #{number}")
    return ok("Invoice deleted successfully")
