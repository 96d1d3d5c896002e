"""流水账API"""
from datetime import date, datetime, time, timedelta
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from export_office.core.deps import get_db
from export_office.models import Admin, Transaction
from export_office.schemas.common import ok
from export_office.schemas.finance import BalanceResponse, LedgerListResponse, TransactionResponse
from export_office.services.ledger import get_current_balance

router = APIRouter()


def build_transaction_response(transaction: Transaction) -> TransactionResponse:
    response = TransactionResponse.model_validate(transaction)
    response.admin_name = transaction.admin.fullname if transaction.admin else None
    return response


@router.get("/")
async def list_transactions(
    *,
    db: AsyncSession = Depends(get_db),
    admin_id: Optional[int] = Query(None, description="按管理员筛选"),
    search: Optional[str] = Query(None, description="管理员姓名 / 摘要"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None)) -> Any:
    """流水列表及收支合计"""
    conditions = []
    if admin_id:
        conditions.append(Transaction.admin_id == admin_id)
    if search:
        pattern = f"%{search.strip()}%"
        conditions.append(or_(Admin.fullname.ilike(pattern), Transaction.details.ilike(pattern)))
    if start_date:
        conditions.append(Transaction.created_at >= datetime.combine(start_date, time.min))
    if end_date:
        conditions.append(Transaction.created_at < datetime.combine(end_date + timedelta(days=1), time.min))

    query = (
        select(Transaction)
        .join(Admin, Transaction.admin_id == Admin.id)
        .options(selectinload(Transaction.admin))
    )
    totals_query = (
        select(
            func.coalesce(func.sum(Transaction.amount_in), 0),
            func.coalesce(func.sum(Transaction.amount_out), 0),
        )
        .join(Admin, Transaction.admin_id == Admin.id)
    )
    if conditions:
        query = query.where(and_(*conditions))
        totals_query = totals_query.where(and_(*conditions))

    result = await db.execute(query.order_by(Transaction.created_at.desc(), Transaction.id.desc()))
    transactions = result.scalars().all()
    total_in, total_out = (await db.execute(totals_query)).one()

    return ok("Transactions fetched successfully", LedgerListResponse(
        transactions=[build_transaction_response(t) for t in transactions],
        total_in=float(total_in or 0),
        total_out=float(total_out or 0),
    ))


@router.get("/balance/{admin_id}")
async def get_balance(
    *,
    db: AsyncSession = Depends(get_db),
    admin_id: int) -> Any:
    """管理员当前余额"""
    if not await db.get(Admin, admin_id):
        raise HTTPException(status_code=404, detail="Admin not found")
    balance = await get_current_balance(db, admin_id)
    return ok("Balance fetched successfully", BalanceResponse(admin_id=admin_id, balance=float(balance)))
