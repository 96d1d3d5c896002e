"""集装箱订舱 Schema"""
from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator

from export_office.schemas.common import OrmResponse, blank_to_zero
from export_office.schemas.invoice import VehicleResponse


class ContainerDetailCreate(BaseModel):
    """提单信息"""
    consignee_name: str = Field(default="", max_length=200)
    notify_party: str = Field(default="", max_length=200)
    shipper_per: str = Field(default="", max_length=200)
    from_port: str = Field(default="", max_length=100)
    to_port: str = Field(default="", max_length=100)
    note: str = ""
    image_path: str = Field(default="", max_length=500)


class ContainerItemCreate(BaseModel):
    """装箱明细，vehicle_id 必填"""
    vehicle_id: int = Field(..., gt=0)
    item_no: str = Field(default="", max_length=20)
    chassis_no: str = Field(default="", max_length=50)
    year: str = Field(default="", max_length=10)
    color: str = Field(default="", max_length=30)
    cc: str = Field(default="", max_length=30)
    amount: float = Field(default=0, ge=0)

    @field_validator("item_no", "year", "cc", mode="before")
    @classmethod
    def as_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("amount", mode="before")
    @classmethod
    def blank_amount(cls, v: Any) -> Any:
        return blank_to_zero(v)


class ContainerBookingCreate(BaseModel):
    booking_no: str = Field(..., min_length=1, max_length=50)
    actual_shipper: str = Field(default="", max_length=100)
    cy_open: str = Field(default="", max_length=50)
    cy_cut_off: Optional[datetime] = None
    etd: Optional[datetime] = None
    eta: Optional[datetime] = None
    volume: str = Field(default="", max_length=50)
    carrier: str = Field(default="", max_length=100)
    vessel: str = Field(default="", max_length=100)
    port_of_loading: str = Field(default="", max_length=100)
    port_of_discharge: str = Field(default="", max_length=100)
    cargo_mode: str = Field(default="", max_length=50)
    place_of_issue: str = Field(default="", max_length=100)
    freight_term: str = Field(default="", max_length=50)
    shipper_name: str = Field(default="", max_length=100)
    consignee: str = Field(default="", max_length=200)
    description_of_goods: str = ""
    container_quantity: int = Field(default=0, ge=0)
    numbers: str = Field(default="", max_length=200)
    image_path: str = Field(default="", max_length=500)
    added_by: int = 0

    container_details: List[ContainerDetailCreate] = Field(default_factory=list)
    container_item_details: List[ContainerItemCreate] = Field(default_factory=list)

    @field_validator("cy_cut_off", "etd", "eta", mode="before")
    @classmethod
    def blank_date(cls, v: Any) -> Any:
        return None if v == "" else v

    @field_validator("description_of_goods", "image_path", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("added_by", "container_quantity", mode="before")
    @classmethod
    def blank_number(cls, v: Any) -> Any:
        return blank_to_zero(v)


class ContainerDetailResponse(OrmResponse):
    id: int
    booking_id: int
    consignee_name: Optional[str] = ""
    notify_party: Optional[str] = ""
    shipper_per: Optional[str] = ""
    from_port: Optional[str] = ""
    to_port: Optional[str] = ""
    note: Optional[str] = ""
    image_path: Optional[str] = ""
    added_by: Optional[int] = 0
    created_at: Optional[datetime] = None


class ContainerItemResponse(OrmResponse):
    id: int
    booking_id: int
    vehicle_id: int
    item_no: Optional[str] = ""
    chassis_no: Optional[str] = ""
    year: Optional[str] = ""
    color: Optional[str] = ""
    cc: Optional[str] = ""
    amount: float = 0
    vehicle: Optional[VehicleResponse] = None


class ContainerBookingResponse(OrmResponse):
    id: int
    booking_no: str
    actual_shipper: Optional[str] = ""
    cy_open: Optional[str] = ""
    cy_cut_off: Optional[datetime] = None
    etd: Optional[datetime] = None
    eta: Optional[datetime] = None
    volume: Optional[str] = ""
    carrier: Optional[str] = ""
    vessel: Optional[str] = ""
    port_of_loading: Optional[str] = ""
    port_of_discharge: Optional[str] = ""
    cargo_mode: Optional[str] = ""
    place_of_issue: Optional[str] = ""
    freight_term: Optional[str] = ""
    shipper_name: Optional[str] = ""
    consignee: Optional[str] = ""
    description_of_goods: Optional[str] = ""
    container_quantity: Optional[int] = 0
    numbers: Optional[str] = ""
    image_path: Optional[str] = ""
    added_by: Optional[int] = 0
    created_at: datetime
    updated_at: Optional[datetime] = None
    container_details: List[ContainerDetailResponse] = []
    container_items: List[ContainerItemResponse] = []
