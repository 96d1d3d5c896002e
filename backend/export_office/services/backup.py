"""
SQLite 数据库文件备份
"""

import os
import shutil
import logging
from datetime import datetime
from typing import List

from export_office.core.config import settings
from export_office.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def get_db_path() -> str:
    """获取数据库文件路径"""
    db_url = settings.SQLITE_DATABASE_URI
    if db_url.startswith("sqlite:///"):
        return db_url.replace("sqlite:///", "")
    elif db_url.startswith("sqlite+aiosqlite:///"):
        return db_url.replace("sqlite+aiosqlite:///", "")
    raise ValidationError("Only SQLite databases can be backed up")


def get_backup_dir() -> str:
    """获取备份目录（数据库文件同级的 backups/）"""
    backup_dir = os.path.join(os.path.dirname(os.path.abspath(get_db_path())), "backups")
    os.makedirs(backup_dir, exist_ok=True)
    return backup_dir


def describe_backup(path: str) -> dict:
    stat = os.stat(path)
    return {
        "filename": os.path.basename(path),
        "size": stat.st_size,
        "size_display": f"{stat.st_size / 1024 / 1024:.2f} MB",
        "created_at": datetime.fromtimestamp(stat.st_mtime).isoformat()
    }


def create_backup(prefix: str = "backup") -> dict:
    """复制数据库文件到备份目录"""
    db_path = get_db_path()
    if not os.path.exists(db_path):
        raise ValidationError("Database file does not exist", db_path)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = os.path.join(get_backup_dir(), f"{prefix}_{timestamp}.db")
    shutil.copy2(db_path, backup_path)
    return describe_backup(backup_path)


def list_backups() -> List[dict]:
    """备份列表（按时间倒序）"""
    backup_dir = get_backup_dir()
    backups = [
        describe_backup(os.path.join(backup_dir, filename))
        for filename in os.listdir(backup_dir)
        if filename.endswith(".db")
    ]
    backups.sort(key=lambda x: x["created_at"], reverse=True)
    return backups


def cleanup_old_backups(backup_dir: str, keep_count: int = 7):
    """清理旧的自动备份，只保留最近的 N 个"""
    auto_backups = []
    for filename in os.listdir(backup_dir):
        if filename.startswith("auto_backup_") and filename.endswith(".db"):
            filepath = os.path.join(backup_dir, filename)
            auto_backups.append((os.stat(filepath).st_mtime, filepath, filename))

    auto_backups.sort(reverse=True)
    for _, filepath, filename in auto_backups[keep_count:]:
        os.remove(filepath)
        logger.info(f"🗑️ 清理旧备份: {filename}")
