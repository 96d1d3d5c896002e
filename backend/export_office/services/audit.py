"""操作日志记录工具"""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from export_office.models.audit_log import AuditLog


def create_audit_log(
    db: AsyncSession,
    admin_id: Optional[int],
    action: str,
    resource_type: str,
    resource_id: Optional[int] = None,
    resource_name: Optional[str] = None,
    description: Optional[str] = None,
    new_value: Optional[dict] = None) -> AuditLog:
    """创建审计日志（随调用方事务一起提交）"""
    log = AuditLog(
        admin_id=admin_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        resource_name=resource_name,
        description=description,
        new_value=new_value
    )
    db.add(log)
    return log
