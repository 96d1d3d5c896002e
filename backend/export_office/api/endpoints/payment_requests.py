"""
充值申请API

管理员上传转账凭证提交申请，审核通过（Approved）时按申请金额记入其流水账。
已通过的申请不能再修改，保证同一笔申请只入账一次
"""
import logging
from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from export_office.core.deps import get_db
from export_office.core.exceptions import NotFoundError, ValidationError
from export_office.models import Admin, PaymentRequest
from export_office.models.finance import PAYMENT_REQUEST_APPROVED
from export_office.schemas.finance import (
    PaymentRequestCreate, PaymentRequestUpdate, PaymentRequestResponse,
)
from export_office.services.audit import create_audit_log
from export_office.services.ledger import post_transaction

logger = logging.getLogger(__name__)

router = APIRouter()


async def load_request(db: AsyncSession, request_id: int) -> PaymentRequest:
    result = await db.execute(
        select(PaymentRequest)
        .options(selectinload(PaymentRequest.admin))
        .where(PaymentRequest.id == request_id)
        .execution_options(populate_existing=True)
    )
    payment_request = result.scalar_one_or_none()
    if not payment_request:
        raise HTTPException(status_code=404, detail="Payment request not found")
    return payment_request


async def credit_request(db: AsyncSession, payment_request: PaymentRequest, verified_by=None) -> None:
    """审核通过：申请金额记入申请人流水账"""
    await post_transaction(
        db,
        admin_id=payment_request.user_id,
        amount_in=payment_request.amount,
        details=f"Payment request {payment_request.transaction_no} approved",
    )
    create_audit_log(
        db, payment_request.user_id, "approve", "payment_request",
        resource_id=payment_request.id,
        resource_name=payment_request.transaction_no,
        description=f"Approved by {verified_by or 'system'}",
        new_value={"amount": float(payment_request.amount)}
    )
    logger.info(f"✅ 充值申请 {payment_request.transaction_no} 已通过: +{payment_request.amount}")


@router.post("/", response_model=PaymentRequestResponse)
async def create_payment_request(
    *,
    db: AsyncSession = Depends(get_db),
    request_in: PaymentRequestCreate) -> Any:
    """提交充值申请（直接以 Approved 提交时立即入账）"""
    if not await db.get(Admin, request_in.user_id):
        raise NotFoundError("Admin not found")

    payment_request = PaymentRequest(**request_in.model_dump())
    db.add(payment_request)
    await db.flush()

    if payment_request.status == PAYMENT_REQUEST_APPROVED:
        await credit_request(db, payment_request)
    await db.commit()

    return await load_request(db, payment_request.id)


@router.get("/", response_model=List[PaymentRequestResponse])
async def list_payment_requests(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    """充值申请列表（最近更新在前，含申请人信息）"""
    result = await db.execute(
        select(PaymentRequest)
        .options(selectinload(PaymentRequest.admin))
        .order_by(PaymentRequest.updated_at.desc(), PaymentRequest.id.desc())
    )
    return result.scalars().all()


@router.put("/{request_id}", response_model=PaymentRequestResponse)
async def update_payment_request(
    *,
    db: AsyncSession = Depends(get_db),
    request_id: int,
    request_in: PaymentRequestUpdate) -> Any:
    """审核充值申请"""
    payment_request = await load_request(db, request_id)
    if payment_request.status == PAYMENT_REQUEST_APPROVED:
        raise ValidationError("An approved payment request cannot be changed")

    payment_request.status = request_in.status
    if request_in.verified_by is not None:
        payment_request.verified_by = request_in.verified_by

    if request_in.status == PAYMENT_REQUEST_APPROVED:
        await credit_request(db, payment_request, request_in.verified_by)
    await db.commit()

    return await load_request(db, request_id)
