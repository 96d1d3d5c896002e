"""流水账服务

所有影响管理员余额的写操作都经过 post_transaction：
- 读取最新一条流水的余额作为变动前余额
- 计算变动后余额，为负时拒绝
- 写入流水并同步 Admin.balance

本模块只 flush 不 commit，由调用方在同一事务中统一提交
"""
import logging
from decimal import Decimal
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from export_office.core.exceptions import InsufficientBalanceError, NotFoundError, ValidationError
from export_office.models.admin import Admin
from export_office.models.finance import Transaction
from export_office.models.invoice import DEFAULT_DISTRIBUTOR_ID, Invoice

logger = logging.getLogger(__name__)

Amount = Union[Decimal, float, int, str, None]


def to_decimal(value: Amount) -> Decimal:
    """金额统一转换为两位小数的 Decimal"""
    if value is None or value == "":
        return Decimal("0.00")
    return Decimal(str(value)).quantize(Decimal("0.01"))


async def get_current_balance(db: AsyncSession, admin_id: int) -> Decimal:
    """管理员当前余额 = 最新一条流水的余额，没有流水时为0"""
    result = await db.execute(
        select(Transaction.balance)
        .where(Transaction.admin_id == admin_id)
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .limit(1)
    )
    balance = result.scalar_one_or_none()
    return to_decimal(balance)


async def post_transaction(
    db: AsyncSession,
    admin_id: int,
    amount_in: Amount = 0,
    amount_out: Amount = 0,
    details: str = "",
    distributor_id: Optional[int] = None,
    added_by: Optional[int] = None,
) -> Transaction:
    """记一笔流水"""
    amount_in = to_decimal(amount_in)
    amount_out = to_decimal(amount_out)
    if amount_in < 0 or amount_out < 0:
        raise ValidationError("Transaction amounts must not be negative")

    admin = await db.get(Admin, admin_id)
    if not admin:
        raise NotFoundError("Admin not found", f"Admin {admin_id} does not exist")

    current = await get_current_balance(db, admin_id)
    new_balance = current + amount_in - amount_out
    if new_balance < 0:
        logger.warning(f"余额不足: admin={admin_id}, 当前={current}, 支出={amount_out}")
        raise InsufficientBalanceError("Insufficient admin balance for this transaction")

    transaction = Transaction(
        admin_id=admin_id,
        distributor_id=distributor_id or DEFAULT_DISTRIBUTOR_ID,
        amount_in=amount_in,
        amount_out=amount_out,
        pre_balance=current,
        balance=new_balance,
        details=details,
        added_by=added_by if added_by is not None else admin_id,
    )
    db.add(transaction)
    admin.balance = new_balance
    await db.flush()

    logger.info(f"💰 记账: admin={admin_id}, +{amount_in} -{amount_out}, 余额 {current} → {new_balance}")
    return transaction


async def post_invoice_payment(
    db: AsyncSession,
    invoice: Invoice,
    distributor_id: Optional[int] = None,
) -> Transaction:
    """发票付款：从录入人的流水账中扣除发票美元金额"""
    return await post_transaction(
        db,
        admin_id=invoice.added_by,
        amount_out=invoice.amount_dollar,
        details=f"Payment for Invoice #{invoice.number}",
        distributor_id=distributor_id,
        added_by=invoice.added_by,
    )
