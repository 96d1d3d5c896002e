"""港口 / 分销商 Schema"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


class ReferenceBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="名称")
    location: Optional[str] = Field("", max_length=200, description="所在地")


class ReferenceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    location: Optional[str] = Field(None, max_length=200)


class SeaPortCreate(ReferenceBase):
    pass


class SeaPortUpdate(ReferenceUpdate):
    pass


class DistributorCreate(ReferenceBase):
    pass


class DistributorUpdate(ReferenceUpdate):
    pass


class ReferenceBrief(BaseModel):
    """嵌套在车辆响应中的简要信息"""
    id: int
    name: str
    location: Optional[str] = ""

    class Config:
        from_attributes = True


class PortVehicleBrief(BaseModel):
    id: int
    chassis_no: str = ""
    maker: str = ""
    status: str

    class Config:
        from_attributes = True


class SeaPortResponse(BaseModel):
    id: int
    name: str
    location: Optional[str] = ""
    created_at: datetime
    updated_at: Optional[datetime] = None
    vehicles: List[PortVehicleBrief] = []

    class Config:
        from_attributes = True


class DistributorResponse(SeaPortResponse):
    pass
