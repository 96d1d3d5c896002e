"""
操作日志模型 - 记录发票、订舱、销售、充值审核等关键写操作
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, JSON

from export_office.db.base import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)

    # 操作人（管理员ID，未知时为空）
    admin_id = Column(Integer, index=True, comment="操作人")

    # create / update / delete / payment / approve
    action = Column(String(20), nullable=False, index=True, comment="操作类型")

    # invoice / cargo / sale / payment_request / expense
    resource_type = Column(String(50), nullable=False, index=True, comment="资源类型")
    resource_id = Column(Integer, index=True, comment="资源ID")
    resource_name = Column(String(100), comment="资源名称/编号")
    description = Column(String(500), comment="操作描述")
    new_value = Column(JSON, comment="操作后的值")

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<AuditLog {self.action} {self.resource_type}:{self.resource_id}>"

    @property
    def action_display(self) -> str:
        action_map = {
            "create": "Created",
            "update": "Updated",
            "delete": "Deleted",
            "payment": "Payment",
            "approve": "Approved",
        }
        return action_map.get(self.action, self.action)
