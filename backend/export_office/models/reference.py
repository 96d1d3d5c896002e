"""
基础资料模型 - 港口 / 分销商

车辆通过 sending_port_id 关联发运港口，通过 distributor_id 关联分销商
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship

from export_office.db.base import Base


class SeaPort(Base):
    """发运港口"""
    __tablename__ = "sea_ports"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, comment="港口名称")
    location = Column(String(200), default="", comment="所在地")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    vehicles = relationship("Vehicle", back_populates="sea_port")


class Distributor(Base):
    """分销商（车辆归属）"""
    __tablename__ = "distributors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, comment="名称")
    location = Column(String(200), default="", comment="所在地")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    vehicles = relationship("Vehicle", back_populates="distributor")
