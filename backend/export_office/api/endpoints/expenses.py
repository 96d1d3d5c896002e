"""费用管理API"""
import logging
from typing import Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from export_office.core.deps import get_db
from export_office.models import Expense
from export_office.schemas.common import ok
from export_office.schemas.finance import ExpenseCreate, ExpenseResponse
from export_office.services.audit import create_audit_log

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def list_expenses(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    result = await db.execute(select(Expense).order_by(Expense.created_at.desc(), Expense.id.desc()))
    expenses = result.scalars().all()
    return ok("Expenses fetched successfully", [ExpenseResponse.model_validate(e) for e in expenses])


@router.post("/", status_code=201)
async def create_expense(
    *,
    db: AsyncSession = Depends(get_db),
    expense_in: ExpenseCreate) -> Any:
    """登记费用"""
    expense = Expense(**expense_in.model_dump())
    db.add(expense)
    await db.flush()

    create_audit_log(
        db, expense.added_by, "create", "expense",
        resource_id=expense.id,
        resource_name=expense.expense_title,
        new_value={"amount": expense_in.amount}
    )
    await db.commit()
    await db.refresh(expense)
    logger.info(f"💸 登记费用: {expense.expense_title} {expense.amount}")

    return ok("Expense created successfully", ExpenseResponse.model_validate(expense))


@router.put("/{expense_id}")
async def update_expense(
    *,
    db: AsyncSession = Depends(get_db),
    expense_id: int,
    expense_in: ExpenseCreate) -> Any:
    expense = await db.get(Expense, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")

    for field, value in expense_in.model_dump().items():
        setattr(expense, field, value)
    create_audit_log(
        db, expense.added_by, "update", "expense",
        resource_id=expense.id,
        resource_name=expense.expense_title,
        new_value={"amount": expense_in.amount}
    )
    await db.commit()
    await db.refresh(expense)

    return ok("Expense updated successfully", ExpenseResponse.model_validate(expense))


@router.delete("/{expense_id}")
async def delete_expense(
    *,
    db: AsyncSession = Depends(get_db),
    expense_id: int) -> Any:
    expense = await db.get(Expense, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")

    await db.delete(expense)
    create_audit_log(
        db, expense.added_by, "delete", "expense",
        resource_id=expense_id,
        resource_name=expense.expense_title
    )
    await db.commit()
    return ok("Expense deleted successfully")
