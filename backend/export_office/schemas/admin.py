"""管理员 Schema"""
from datetime import datetime
from typing import Any
from pydantic import BaseModel, Field, field_validator

from export_office.schemas.common import decimal_to_float


class AdminCreate(BaseModel):
    fullname: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=1, max_length=50)
    role: str = Field(default="admin", pattern="^(admin|staff)$")


class AdminBrief(BaseModel):
    """嵌套在充值申请中的管理员信息"""
    id: int
    fullname: str
    username: str
    role: str
    balance: float = 0.0

    @field_validator("balance", mode="before")
    @classmethod
    def fix_balance(cls, v: Any) -> float:
        return decimal_to_float(v)

    class Config:
        from_attributes = True


class AdminResponse(AdminBrief):
    is_active: bool
    created_at: datetime
