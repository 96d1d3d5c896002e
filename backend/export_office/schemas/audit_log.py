"""
操作日志 Schema
"""

from datetime import datetime
from typing import Optional, Any, List
from pydantic import BaseModel


class AuditLogResponse(BaseModel):
    id: int
    admin_id: Optional[int] = None
    action: str
    action_display: str
    resource_type: str
    resource_id: Optional[int] = None
    resource_name: Optional[str] = None
    description: Optional[str] = None
    new_value: Optional[Any] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AuditLogListResponse(BaseModel):
    total: int
    page: int
    limit: int
    data: List[AuditLogResponse]
