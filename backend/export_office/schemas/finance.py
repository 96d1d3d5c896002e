"""资金相关 Schema - 流水账 / 充值申请 / 费用 / 销售 / 港口代收"""
from datetime import date as date_type, datetime
from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator

from export_office.schemas.admin import AdminBrief
from export_office.schemas.common import OrmResponse, blank_to_zero


# ===== 流水账 =====
class TransactionResponse(OrmResponse):
    id: int
    admin_id: int
    admin_name: Optional[str] = None
    distributor_id: Optional[int] = None
    amount_in: float = 0
    amount_out: float = 0
    pre_balance: float = 0
    balance: float = 0
    details: Optional[str] = ""
    added_by: Optional[int] = None
    created_at: datetime


class LedgerListResponse(BaseModel):
    transactions: List[TransactionResponse]
    total_in: float = 0
    total_out: float = 0


class BalanceResponse(BaseModel):
    admin_id: int
    balance: float


# ===== 充值申请 =====
class PaymentRequestCreate(BaseModel):
    user_id: int = Field(..., gt=0)
    transaction_no: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., gt=0, description="充值金额")
    img_url: str = Field(..., min_length=1, max_length=500)
    status: str = Field(..., pattern="^(Pending|Approved|Rejected)$")


class PaymentRequestUpdate(BaseModel):
    status: str = Field(..., pattern="^(Pending|Approved|Rejected)$")
    verified_by: Optional[str] = Field(None, max_length=100)


class PaymentRequestResponse(OrmResponse):
    id: int
    user_id: int
    transaction_no: str
    amount: float
    img_url: str
    status: str
    verified_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    admin: Optional[AdminBrief] = None


# ===== 费用 =====
class ExpenseCreate(BaseModel):
    user_id: int = Field(..., gt=0)
    expense_title: str = Field(..., min_length=1, max_length=200)
    expense_description: str = ""
    amount: float = Field(..., gt=0)
    added_by: int = Field(..., gt=0)

    @field_validator("expense_description", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class ExpenseResponse(OrmResponse):
    id: int
    user_id: int
    expense_title: str
    expense_description: Optional[str] = ""
    amount: float
    added_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None


# ===== 销售 =====
class SaleCreate(BaseModel):
    admin_id: int = Field(..., gt=0)
    vehicle_no: str = Field(..., min_length=1, max_length=50)
    date: date_type
    sale_price: float = Field(..., gt=0)
    commission_amount: float = Field(default=0, ge=0)
    other_charges: float = Field(default=0, ge=0)
    total_amount: Optional[float] = Field(None, ge=0, description="不传时按售价+佣金+其他费用计算")
    fullname: str = Field(default="", max_length=100)
    mobile_no: str = Field(default="", max_length=30)
    passport_no: str = Field(default="", max_length=50)
    details: str = ""
    image_path: str = Field(default="", max_length=500)

    @field_validator("commission_amount", "other_charges", mode="before")
    @classmethod
    def blank_amount(cls, v: Any) -> Any:
        return blank_to_zero(v)

    @field_validator("total_amount", mode="before")
    @classmethod
    def blank_total(cls, v: Any) -> Any:
        return None if v == "" else v


class SaleResponse(OrmResponse):
    id: int
    admin_id: int
    vehicle_no: str
    date: date_type
    sale_price: float
    commission_amount: float = 0
    other_charges: float = 0
    total_amount: float = 0
    fullname: Optional[str] = ""
    mobile_no: Optional[str] = ""
    passport_no: Optional[str] = ""
    details: Optional[str] = ""
    image_path: Optional[str] = ""
    created_at: datetime


# ===== 港口代收 =====
COLLECT_AMOUNT_FIELDS = (
    "freight_amount", "port_charges", "clearing_charges", "other_charges", "v_amount",
)


class PortCollectCreate(BaseModel):
    vehicle_no: str = Field(..., min_length=1, max_length=50)
    invoice_no: str = Field(..., min_length=1, max_length=50)
    date: Optional[date_type] = None
    freight_amount: float = Field(default=0, ge=0)
    port_charges: float = Field(default=0, ge=0)
    clearing_charges: float = Field(default=0, ge=0)
    other_charges: float = Field(default=0, ge=0)
    total_amount: Optional[float] = Field(None, ge=0, description="不传时按各项费用合计")
    v_amount: float = Field(default=0, ge=0)
    image_path: str = Field(default="", max_length=500)
    admin_id: Optional[int] = None

    @field_validator("invoice_no", "vehicle_no", mode="before")
    @classmethod
    def as_text(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator(*COLLECT_AMOUNT_FIELDS, mode="before")
    @classmethod
    def blank_amount(cls, v: Any) -> Any:
        return blank_to_zero(v)

    @field_validator("date", "total_amount", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return None if v == "" else v


class PortCollectResponse(OrmResponse):
    id: int
    vehicle_no: str
    invoice_no: str
    date: Optional[date_type] = None
    freight_amount: float = 0
    port_charges: float = 0
    clearing_charges: float = 0
    other_charges: float = 0
    total_amount: float = 0
    v_amount: float = 0
    image_path: Optional[str] = ""
    admin_id: Optional[int] = None
    created_at: datetime


class CollectVehicle(BaseModel):
    """代收页面查询车辆的返回格式"""
    vehicle_id: int
    chassis_no: str
    year: str
    color: str
    cc: str
