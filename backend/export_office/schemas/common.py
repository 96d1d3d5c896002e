"""通用 Schema"""
from decimal import Decimal
from typing import Any
from pydantic import BaseModel, field_validator


class ErrorResponse(BaseModel):
    """统一错误格式"""
    message: str
    status: bool = False
    error: str = ""


def blank_to_zero(v: Any) -> Any:
    """前端表单的空值（None、空字符串）按0处理"""
    if v is None or (isinstance(v, str) and v.strip() == ""):
        return 0
    return v


def decimal_to_float(v: Any) -> Any:
    """数据库 DECIMAL 转 float 输出"""
    if v is None:
        return 0.0
    if isinstance(v, Decimal):
        return float(v)
    return v


def ok(message: str, data: Any = None) -> dict:
    """构建成功响应"""
    return {"message": message, "status": True, "data": data}


class OrmResponse(BaseModel):
    """ORM 对象响应基类：DECIMAL 字段统一输出为 float"""

    @field_validator("*", mode="before")
    @classmethod
    def decimals_as_float(cls, v: Any) -> Any:
        return float(v) if isinstance(v, Decimal) else v

    class Config:
        from_attributes = True


class ImageUpload(BaseModel):
    """图片上传：base64 字符串或 data URL"""
    image: str
