"""后台 API 路由聚合 - 单机版（无认证）"""
from fastapi import APIRouter

from export_office.api.endpoints import (
    invoices, vehicles, inspections, transports, cargo,
    sea_ports, distributors, expenses, sales, payment_requests, collect,
    ledger, admins, exchange_rate, uploads, audit_logs, backup
)

api_router = APIRouter()

# 车辆业务流程
api_router.include_router(invoices.router, prefix="/invoice-management", tags=["发票管理"])
api_router.include_router(vehicles.router, prefix="/vehicles", tags=["车辆管理"])
api_router.include_router(transports.router, prefix="/transport-management", tags=["内陆运输"])
api_router.include_router(inspections.router, prefix="/inspection", tags=["出口验车"])
api_router.include_router(cargo.router, prefix="/cargo", tags=["集装箱订舱"])
api_router.include_router(sales.router, prefix="/sale", tags=["车辆销售"])
api_router.include_router(collect.router, prefix="/collect", tags=["港口代收"])

# 基础资料
api_router.include_router(sea_ports.router, prefix="/sea_ports", tags=["港口管理"])
api_router.include_router(distributors.router, prefix="/distributors", tags=["分销商管理"])
api_router.include_router(admins.router, prefix="/admins", tags=["管理员"])

# 资金
api_router.include_router(ledger.router, prefix="/ledger", tags=["流水账"])
api_router.include_router(payment_requests.router, prefix="/payment-request", tags=["充值申请"])
api_router.include_router(expenses.router, prefix="/expense", tags=["费用管理"])
api_router.include_router(exchange_rate.router, prefix="/exchange-rate", tags=["汇率"])

# 系统
api_router.include_router(uploads.router, prefix="/uploads", tags=["图片上传"])
api_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["操作日志"])
api_router.include_router(backup.router, prefix="/backup", tags=["数据备份"])
