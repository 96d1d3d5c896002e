"""运输 / 验车 Schema"""
from datetime import date as date_type, datetime
from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator

from export_office.schemas.common import OrmResponse, blank_to_zero
from export_office.schemas.invoice import VehicleResponse, VehicleDetailResponse


class InspectionVehicle(BaseModel):
    """验车单中的一台车"""
    id: Optional[int] = Field(None, description="车辆ID，传入时更新车辆状态")
    vehicle_no: str = Field(..., min_length=1, max_length=50, description="车架号")
    amount: float = Field(..., gt=0, description="费用（日元）")
    amount_dollar: float = Field(..., ge=0, description="费用（美元）")

    @field_validator("amount_dollar", mode="before")
    @classmethod
    def blank_dollar(cls, v: Any) -> Any:
        return blank_to_zero(v)


class InspectionCreate(BaseModel):
    date: date_type
    company: str = Field(..., min_length=1, max_length=100)
    added_by: int = Field(..., gt=0)
    image_path: Optional[str] = Field("", max_length=500)
    vehicles: List[InspectionVehicle] = Field(..., min_length=1)


class InspectionResponse(OrmResponse):
    id: int
    vehicle_no: str
    company: str
    date: date_type
    amount: float = 0
    amount_dollar: float = 0
    image_path: Optional[str] = ""
    added_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class InspectionWithVehicle(InspectionResponse):
    vehicle: Optional[VehicleResponse] = None


class TransportVehicle(BaseModel):
    """运输单中的一台车"""
    id: Optional[int] = Field(None, description="车辆ID，传入时更新车辆状态")
    vehicle_no: str = Field(..., min_length=1, max_length=50, description="车架号")
    fee: float = Field(..., gt=0, description="运费（日元）")
    fee_dollar: float = Field(..., ge=0, description="运费（美元）")
    delivery_date: Optional[date_type] = None
    port: Optional[str] = Field("", max_length=100)

    @field_validator("delivery_date", mode="before")
    @classmethod
    def blank_date(cls, v: Any) -> Any:
        return None if v == "" else v

    @field_validator("fee_dollar", mode="before")
    @classmethod
    def blank_dollar(cls, v: Any) -> Any:
        return blank_to_zero(v)


class TransportCreate(BaseModel):
    date: date_type
    company: str = Field(..., min_length=1, max_length=100)
    added_by: int = Field(..., gt=0)
    image_path: Optional[str] = Field("", max_length=500)
    vehicles: List[TransportVehicle] = Field(..., min_length=1)


class TransportResponse(OrmResponse):
    id: int
    vehicle_no: str
    date: date_type
    delivery_date: Optional[date_type] = None
    port: Optional[str] = ""
    company: str
    fee: float = 0
    fee_dollar: float = 0
    image_path: Optional[str] = ""
    added_by: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class ContainerItemBrief(OrmResponse):
    id: int
    booking_id: int
    item_no: Optional[str] = ""
    chassis_no: Optional[str] = ""
    year: Optional[str] = ""
    color: Optional[str] = ""
    cc: Optional[str] = ""
    amount: float = 0
    created_at: Optional[datetime] = None


class TransportVehicleResponse(VehicleResponse):
    container_items: List[ContainerItemBrief] = []


class TransportWithVehicles(TransportResponse):
    vehicles: List[TransportVehicleResponse] = []



class VehicleFullResponse(VehicleDetailResponse):
    """车辆详情：港口、分销商、图片、装箱明细、运输记录"""
    container_items: List[ContainerItemBrief] = []
    transports: List[TransportResponse] = []
