"""
资金相关模型 - 流水账 / 充值申请 / 费用 / 销售 / 港口代收

流水账核心逻辑：
- 每个管理员一本流水账，按时间顺序记录
- 每条流水记录 变动前余额(pre_balance) 与 变动后余额(balance)
- 当前余额 = 最新一条流水的 balance
- 发票付款（amount_out）→ 余额减少，余额不足时拒绝
- 充值申请审核通过（amount_in）→ 余额增加
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, DECIMAL
from sqlalchemy.orm import relationship

from export_office.db.base import Base

PAYMENT_REQUEST_PENDING = "Pending"
PAYMENT_REQUEST_APPROVED = "Approved"
PAYMENT_REQUEST_REJECTED = "Rejected"


class Transaction(Base):
    """流水账"""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(Integer, ForeignKey("admins.id"), nullable=False, index=True)
    distributor_id = Column(Integer, ForeignKey("distributors.id"), comment="关联分销商")

    amount_in = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="收入")
    amount_out = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="支出")
    pre_balance = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="变动前余额")
    balance = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="变动后余额")
    details = Column(String(500), default="", comment="摘要")

    added_by = Column(Integer, ForeignKey("admins.id"))
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    admin = relationship("Admin", foreign_keys=[admin_id], back_populates="transactions")
    distributor = relationship("Distributor")

    def __repr__(self):
        return f"<Transaction admin={self.admin_id} +{self.amount_in} -{self.amount_out} = {self.balance}>"


class PaymentRequest(Base):
    """充值申请（管理员上传转账凭证，审核通过后入账）"""
    __tablename__ = "payment_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("admins.id"), nullable=False, index=True)
    transaction_no = Column(String(100), nullable=False, comment="银行流水号")
    amount = Column(DECIMAL(14, 2), nullable=False)
    img_url = Column(String(500), nullable=False, comment="转账凭证")
    status = Column(String(20), nullable=False, default=PAYMENT_REQUEST_PENDING, index=True)
    verified_by = Column(String(100), comment="审核人")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, index=True)

    admin = relationship("Admin", back_populates="payment_requests")


class Expense(Base):
    """日常费用"""
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, comment="经办人")
    expense_title = Column(String(200), nullable=False)
    expense_description = Column(Text, default="")
    amount = Column(DECIMAL(14, 2), nullable=False)

    added_by = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class SaleVehicle(Base):
    """车辆销售记录"""
    __tablename__ = "sale_vehicles"

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(Integer, ForeignKey("admins.id"), nullable=False, index=True)
    vehicle_no = Column(String(50), nullable=False, index=True, comment="车架号")
    date = Column(Date, nullable=False)
    sale_price = Column(DECIMAL(14, 2), nullable=False)
    commission_amount = Column(DECIMAL(14, 2), default=Decimal("0.00"))
    other_charges = Column(DECIMAL(14, 2), default=Decimal("0.00"))
    total_amount = Column(DECIMAL(14, 2), default=Decimal("0.00"))

    # 买家信息
    fullname = Column(String(100), default="")
    mobile_no = Column(String(30), default="")
    passport_no = Column(String(50), default="")
    details = Column(Text, default="")
    image_path = Column(String(500), default="")

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    admin = relationship("Admin")


class PortCollect(Base):
    """目的港代收费用（运费、港杂、清关等）"""
    __tablename__ = "port_collects"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_no = Column(String(50), nullable=False, index=True)
    invoice_no = Column(String(50), nullable=False, index=True)
    date = Column(Date)
    freight_amount = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="海运费")
    port_charges = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="港杂费")
    clearing_charges = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="清关费")
    other_charges = Column(DECIMAL(14, 2), default=Decimal("0.00"))
    total_amount = Column(DECIMAL(14, 2), default=Decimal("0.00"))
    v_amount = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="车辆金额")
    image_path = Column(String(500), default="")

    admin_id = Column(Integer, ForeignKey("admins.id"))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
