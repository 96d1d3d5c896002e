"""
集装箱订舱模型

结构说明：
- 订舱单（ContainerBooking）
  ├── 提单信息（ContainerDetail，每张订舱单恰好一条）
  └── 装箱明细（ContainerItemDetail，每行对应一台车）
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, DECIMAL
from sqlalchemy.orm import relationship

from export_office.db.base import Base


class ContainerBooking(Base):
    """订舱单"""
    __tablename__ = "container_bookings"

    id = Column(Integer, primary_key=True, index=True)
    booking_no = Column(String(50), unique=True, nullable=False, index=True, comment="订舱号")

    actual_shipper = Column(String(100), default="")
    cy_open = Column(String(50), default="", comment="开港时间")
    cy_cut_off = Column(DateTime, comment="截港时间")
    etd = Column(DateTime, comment="预计离港")
    eta = Column(DateTime, comment="预计到港")

    volume = Column(String(50), default="")
    carrier = Column(String(100), default="", comment="船公司")
    vessel = Column(String(100), default="", comment="船名航次")
    port_of_loading = Column(String(100), default="")
    port_of_discharge = Column(String(100), default="")
    cargo_mode = Column(String(50), default="")
    place_of_issue = Column(String(100), default="")
    freight_term = Column(String(50), default="")
    shipper_name = Column(String(100), default="")
    consignee = Column(String(200), default="")
    description_of_goods = Column(Text, default="")
    container_quantity = Column(Integer, default=0)
    numbers = Column(String(200), default="", comment="箱号")
    image_path = Column(String(500), default="")

    added_by = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    container_details = relationship(
        "ContainerDetail", back_populates="booking", cascade="all, delete-orphan"
    )
    container_items = relationship(
        "ContainerItemDetail", back_populates="booking", order_by="ContainerItemDetail.id",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<ContainerBooking {self.booking_no}>"


class ContainerDetail(Base):
    """提单信息"""
    __tablename__ = "container_details"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("container_bookings.id"), nullable=False, index=True)
    consignee_name = Column(String(200), default="")
    notify_party = Column(String(200), default="")
    shipper_per = Column(String(200), default="")
    from_port = Column(String(100), default="")
    to_port = Column(String(100), default="")
    note = Column(Text, default="")
    image_path = Column(String(500), default="")

    added_by = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    booking = relationship("ContainerBooking", back_populates="container_details")


class ContainerItemDetail(Base):
    """装箱明细"""
    __tablename__ = "container_item_details"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("container_bookings.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    item_no = Column(String(20), default="", comment="箱内序号")
    chassis_no = Column(String(50), default="")
    year = Column(String(10), default="")
    color = Column(String(30), default="")
    cc = Column(String(30), default="", comment="排量")
    amount = Column(DECIMAL(14, 2), default=Decimal("0.00"))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    booking = relationship("ContainerBooking", back_populates="container_items")
    vehicle = relationship("Vehicle", back_populates="container_items")
