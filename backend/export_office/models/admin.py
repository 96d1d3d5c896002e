"""
后台管理员模型

每个管理员拥有一本独立的流水账（Transaction），
balance 字段只是最新一条流水余额的镜像，方便列表展示
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Boolean, DateTime, DECIMAL
from sqlalchemy.orm import relationship

from export_office.db.base import Base


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    fullname = Column(String(100), nullable=False, comment="姓名")
    username = Column(String(50), unique=True, index=True, nullable=False)
    # admin: 管理员, staff: 普通员工
    role = Column(String(20), nullable=False, default="admin")
    balance = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="当前余额（流水镜像）")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    transactions = relationship(
        "Transaction", back_populates="admin", foreign_keys="Transaction.admin_id",
        order_by="Transaction.id"
    )
    payment_requests = relationship("PaymentRequest", back_populates="admin")

    def __repr__(self):
        return f"<Admin {self.username} ${self.balance}>"
