"""数据备份API - 单机版（无权限检查）"""

import os
from typing import Any
from fastapi import APIRouter

from export_office.schemas.common import ok
from export_office.services import backup as backup_service
from export_office.services.scheduler import get_scheduler_status

router = APIRouter()


@router.get("/")
async def list_backups() -> Any:
    """获取备份列表"""
    return ok("Backups fetched successfully", {
        "backups": backup_service.list_backups(),
        "backup_dir": os.path.abspath(backup_service.get_backup_dir()),
        "scheduler": get_scheduler_status(),
    })


@router.post("/create")
async def create_backup() -> Any:
    """立即备份数据库文件"""
    backup = backup_service.create_backup()
    return ok(f"Backup created: {backup['filename']}", backup)
