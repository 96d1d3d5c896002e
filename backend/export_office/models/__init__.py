# models包初始化文件
# 导入全部模型，确保建表时所有表都注册到 Base.metadata

from export_office.models.admin import Admin
from export_office.models.reference import SeaPort, Distributor
from export_office.models.invoice import Invoice, Vehicle, VehicleImage
from export_office.models.logistics import Transport, Inspection
from export_office.models.cargo import ContainerBooking, ContainerDetail, ContainerItemDetail
from export_office.models.finance import (
    Transaction, PaymentRequest, Expense, SaleVehicle, PortCollect
)
from export_office.models.audit_log import AuditLog

__all__ = [
    "Admin",
    "SeaPort",
    "Distributor",
    "Invoice",
    "Vehicle",
    "VehicleImage",
    "Transport",
    "Inspection",
    "ContainerBooking",
    "ContainerDetail",
    "ContainerItemDetail",
    "Transaction",
    "PaymentRequest",
    "Expense",
    "SaleVehicle",
    "PortCollect",
    "AuditLog",
]
