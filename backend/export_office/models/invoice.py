"""
拍卖发票 / 车辆模型

结构说明：
- 发票（Invoice）
  └── 车辆（Vehicle，一张发票可包含多台车）
      └── 车辆图片（VehicleImage）

车辆状态流转：Pending → Transport → Inspection → Shipped → Sold
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import (
    Column, Integer, String, Date, DateTime, ForeignKey, DECIMAL, UniqueConstraint
)
from sqlalchemy.orm import relationship

from export_office.db.base import Base

INVOICE_UNPAID = "UNPAID"
INVOICE_PAID = "PAID"

VEHICLE_PENDING = "Pending"
VEHICLE_TRANSPORT = "Transport"
VEHICLE_INSPECTION = "Inspection"
VEHICLE_SHIPPED = "Shipped"
VEHICLE_SOLD = "Sold"
VEHICLE_STATUSES = (
    VEHICLE_PENDING, VEHICLE_TRANSPORT, VEHICLE_INSPECTION, VEHICLE_SHIPPED, VEHICLE_SOLD
)

# 未指定分销商时归入的默认分销商
DEFAULT_DISTRIBUTOR_ID = 1


class Invoice(Base):
    """拍卖行发票"""
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, comment="发票日期")
    number = Column(Integer, unique=True, nullable=False, index=True, comment="发票号")
    status = Column(String(20), nullable=False, default=INVOICE_UNPAID, index=True)
    auction_house = Column(String(100), default="", comment="拍卖行")
    image_path = Column(String(500), default="", comment="发票扫描件")

    amount_yen = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="日元金额")
    amount_dollar = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="美元金额")

    added_by = Column(Integer, ForeignKey("admins.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    vehicles = relationship(
        "Vehicle", back_populates="invoice", order_by="Vehicle.id", cascade="all, delete-orphan"
    )
    creator = relationship("Admin", foreign_keys=[added_by])

    def __repr__(self):
        return f"<Invoice #{self.number} {self.status}>"


class Vehicle(Base):
    """发票中的车辆明细"""
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), index=True, comment="所属发票")
    # 发票号文本（默认等于所属发票号）
    invoice_no = Column(String(50), default="", index=True)

    chassis_no = Column(String(50), default="", index=True, comment="车架号")
    maker = Column(String(50), default="")
    year = Column(String(10), default="")
    color = Column(String(30), default="")
    engine_type = Column(String(50), default="")
    auction_house = Column(String(100), default="")

    # 金额（日元）
    bid_amount = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="竞拍价")
    ten_percent_add = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="竞拍价10%附加")
    recycle_amount = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="回收费")
    commission_amount = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="佣金")
    number_plate_tax = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="牌照税")
    repair_charges = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="维修费")
    additional_amount = Column(DECIMAL(14, 2), default=Decimal("0.00"), comment="其他附加")
    total_amount_yen = Column(DECIMAL(14, 2), default=Decimal("0.00"))
    total_amount_dollars = Column(DECIMAL(14, 2), default=Decimal("0.00"))

    sending_port_id = Column(Integer, ForeignKey("sea_ports.id"), nullable=False, comment="发运港口")
    distributor_id = Column(Integer, ForeignKey("distributors.id"), default=DEFAULT_DISTRIBUTOR_ID)

    # 单证
    is_document_required = Column(String(5), default="no")
    document_receive_date = Column(DateTime)
    is_ownership = Column(String(5), default="no")
    ownership_date = Column(DateTime)

    status = Column(String(20), nullable=False, default=VEHICLE_PENDING, index=True)

    added_by = Column(Integer, ForeignKey("admins.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    invoice = relationship("Invoice", back_populates="vehicles")
    sea_port = relationship("SeaPort", back_populates="vehicles")
    distributor = relationship("Distributor", back_populates="vehicles")
    images = relationship(
        "VehicleImage", back_populates="vehicle", order_by="VehicleImage.id",
        cascade="all, delete-orphan"
    )
    container_items = relationship("ContainerItemDetail", back_populates="vehicle")

    def __repr__(self):
        return f"<Vehicle {self.chassis_no} {self.status}>"


class VehicleImage(Base):
    """车辆图片"""
    __tablename__ = "vehicle_images"
    __table_args__ = (UniqueConstraint("vehicle_id", "image_path", name="uq_vehicle_image_path"),)

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    image_path = Column(String(500), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    vehicle = relationship("Vehicle", back_populates="images")
