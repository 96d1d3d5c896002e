"""
车辆物流环节模型 - 内陆运输 / 验车

两者都以车架号（vehicle_no）对应车辆，不建外键：
记录可能先于车辆录入，也可能对应已删除的车辆
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, DECIMAL

from export_office.db.base import Base


class Transport(Base):
    """内陆运输记录（拍卖场 → 港口）"""
    __tablename__ = "transports"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_no = Column(String(50), nullable=False, index=True, comment="车架号")
    date = Column(Date, nullable=False, comment="提车日期")
    delivery_date = Column(Date, comment="送达日期")
    port = Column(String(100), default="", comment="目的港口")
    company = Column(String(100), nullable=False, comment="运输公司")
    fee = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="运费（日元）")
    fee_dollar = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="运费（美元）")
    image_path = Column(String(500), default="")

    added_by = Column(Integer, ForeignKey("admins.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Inspection(Base):
    """出口验车记录"""
    __tablename__ = "inspections"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_no = Column(String(50), nullable=False, index=True, comment="车架号")
    company = Column(String(100), nullable=False, comment="验车机构")
    date = Column(Date, nullable=False)
    amount = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="费用（日元）")
    amount_dollar = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="费用（美元）")
    image_path = Column(String(500), default="")

    added_by = Column(Integer, ForeignKey("admins.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
