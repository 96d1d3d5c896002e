"""发票 / 车辆 Schema"""
from datetime import date as date_type, datetime
from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator

from export_office.schemas.common import OrmResponse, blank_to_zero
from export_office.schemas.reference import ReferenceBrief


AMOUNT_FIELDS = (
    "bid_amount", "recycle_amount", "commission_amount", "number_plate_tax",
    "repair_charges", "additional_amount",
)


# ===== 车辆 =====
class VehicleCreate(BaseModel):
    """发票中的车辆明细"""
    invoice_no: Optional[str] = Field(None, max_length=50, description="发票号，默认取所属发票号")
    chassis_no: str = Field(default="", max_length=50, description="车架号")
    maker: str = Field(default="", max_length=50)
    year: str = Field(default="", max_length=10)
    color: str = Field(default="", max_length=30)
    engine_type: str = Field(default="", max_length=50)
    auction_house: str = Field(default="", max_length=100)

    bid_amount: float = Field(default=0, ge=0, description="竞拍价（日元）")
    recycle_amount: float = Field(default=0, ge=0)
    commission_amount: float = Field(default=0, ge=0)
    number_plate_tax: float = Field(default=0, ge=0)
    repair_charges: float = Field(default=0, ge=0)
    additional_amount: float = Field(default=0, ge=0)
    # 以下三项不传时由服务端计算
    ten_percent_add: Optional[float] = Field(None, ge=0)
    total_amount_yen: Optional[float] = Field(None, ge=0)
    total_amount_dollars: Optional[float] = Field(None, ge=0)

    sending_port_id: int = Field(..., gt=0, description="发运港口ID")
    distributor_id: Optional[int] = Field(None, description="分销商ID，默认1")

    is_document_required: str = Field(default="no", pattern="^(yes|no)$")
    document_receive_date: Optional[datetime] = None
    is_ownership: str = Field(default="no", pattern="^(yes|no)$")
    ownership_date: Optional[datetime] = None

    status: str = Field(default="Pending", pattern="^(Pending|Transport|Inspection|Shipped|Sold)$")
    vehicle_images: List[str] = Field(default_factory=list, description="图片地址")

    @field_validator(*AMOUNT_FIELDS, mode="before")
    @classmethod
    def blank_amount(cls, v: Any) -> Any:
        return blank_to_zero(v)

    @field_validator("year", mode="before")
    @classmethod
    def year_as_text(cls, v: Any) -> str:
        """年份统一存为字符串"""
        return "" if v is None else str(v)

    @field_validator("document_receive_date", "ownership_date", "distributor_id", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @field_validator("is_document_required", "is_ownership", "status", mode="before")
    @classmethod
    def blank_to_default(cls, v: Any, info) -> Any:
        if v is None or (isinstance(v, str) and v.strip() == ""):
            return "Pending" if info.field_name == "status" else "no"
        return v


class VehicleImageResponse(OrmResponse):
    id: int
    image_path: str
    created_at: Optional[datetime] = None


class VehicleResponse(OrmResponse):
    """车辆（含图片）"""
    id: int
    invoice_id: Optional[int] = None
    invoice_no: Optional[str] = ""
    chassis_no: Optional[str] = ""
    maker: Optional[str] = ""
    year: Optional[str] = ""
    color: Optional[str] = ""
    engine_type: Optional[str] = ""
    auction_house: Optional[str] = ""
    bid_amount: float = 0
    ten_percent_add: float = 0
    recycle_amount: float = 0
    commission_amount: float = 0
    number_plate_tax: float = 0
    repair_charges: float = 0
    additional_amount: float = 0
    total_amount_yen: float = 0
    total_amount_dollars: float = 0
    sending_port_id: int
    distributor_id: Optional[int] = None
    is_document_required: Optional[str] = "no"
    document_receive_date: Optional[datetime] = None
    is_ownership: Optional[str] = "no"
    ownership_date: Optional[datetime] = None
    status: str
    added_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None
    images: List[VehicleImageResponse] = []


class VehicleDetailResponse(VehicleResponse):
    """车辆（含港口、分销商）"""
    sea_port: Optional[ReferenceBrief] = None
    distributor: Optional[ReferenceBrief] = None


# ===== 发票 =====
class InvoiceCreate(BaseModel):
    """创建发票（含车辆明细）"""
    date: date_type
    number: int = Field(..., gt=0, description="发票号")
    status: str = Field(..., pattern="^(UNPAID|PAID)$")
    added_by: int = Field(..., gt=0, description="录入人（管理员ID）")
    auction_house: str = Field(default="", max_length=100)
    image_path: str = Field(default="", max_length=500)
    amount_yen: float = Field(default=0, ge=0)
    amount_dollar: Optional[float] = Field(None, ge=0, description="不传时按 exchange_rate 换算")
    exchange_rate: Optional[float] = Field(None, gt=0, description="JPY→USD 汇率")
    vehicles: List[VehicleCreate] = Field(default_factory=list)

    @field_validator("amount_yen", mode="before")
    @classmethod
    def blank_amount(cls, v: Any) -> Any:
        return blank_to_zero(v)

    @field_validator("auction_house", "image_path", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class InvoiceUpdate(BaseModel):
    """更新发票"""
    status: Optional[str] = Field(None, pattern="^(UNPAID|PAID)$")
    date: Optional[date_type] = None
    auction_house: Optional[str] = Field(None, max_length=100)
    image_path: Optional[str] = Field(None, max_length=500)


class InvoiceResponse(OrmResponse):
    id: int
    date: date_type
    number: int
    status: str
    auction_house: Optional[str] = ""
    image_path: Optional[str] = ""
    amount_yen: float = 0
    amount_dollar: float = 0
    added_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None
    vehicles: List[VehicleResponse] = []


class InvoiceCreateResult(BaseModel):
    invoice: InvoiceResponse
    vehicles: List[VehicleResponse]
