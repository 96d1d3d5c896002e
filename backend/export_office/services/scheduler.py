"""
定时任务调度器服务
使用 APScheduler 实现自动备份、汇率刷新等定时任务
"""

import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from export_office.core.config import settings
from export_office.core.exceptions import ExportOfficeError
from export_office.services.backup import create_backup, cleanup_old_backups, get_backup_dir
from export_office.services.currency import refresh_rate

logger = logging.getLogger(__name__)

# 全局调度器实例
scheduler: Optional[AsyncIOScheduler] = None


def auto_backup():
    """执行自动备份任务"""
    try:
        backup = create_backup(prefix="auto_backup")
        logger.info(f"✅ 自动备份完成: {backup['filename']} ({backup['size_display']})")
        cleanup_old_backups(get_backup_dir(), keep_count=settings.AUTO_BACKUP_KEEP_COUNT)
    except (ExportOfficeError, OSError) as e:
        logger.error(f"❌ 自动备份失败: {e}")


async def refresh_exchange_rate():
    """定时刷新 JPY→USD 汇率缓存"""
    try:
        await refresh_rate()
    except ExportOfficeError as e:
        logger.warning(f"汇率刷新失败，继续使用缓存: {e.error}")


def init_scheduler():
    """初始化并启动调度器"""
    global scheduler

    scheduler = AsyncIOScheduler()

    if settings.AUTO_BACKUP_ENABLED:
        scheduler.add_job(
            auto_backup,
            trigger=CronTrigger(
                hour=settings.AUTO_BACKUP_HOUR,
                minute=settings.AUTO_BACKUP_MINUTE
            ),
            id="auto_backup",
            name="Database auto backup",
            replace_existing=True
        )
        logger.info(f"📦 自动备份时间: 每天 {settings.AUTO_BACKUP_HOUR:02d}:{settings.AUTO_BACKUP_MINUTE:02d}")

    if settings.EXCHANGE_RATE_REFRESH_ENABLED and settings.EXCHANGE_RATE_API_KEY:
        scheduler.add_job(
            refresh_exchange_rate,
            trigger=IntervalTrigger(minutes=settings.EXCHANGE_RATE_REFRESH_MINUTES),
            id="refresh_exchange_rate",
            name="JPY/USD rate refresh",
            replace_existing=True
        )
        logger.info(f"💱 汇率刷新间隔: {settings.EXCHANGE_RATE_REFRESH_MINUTES} 分钟")

    if not scheduler.get_jobs():
        logger.info("⏰ 没有启用的定时任务")
        scheduler = None
        return

    scheduler.start()
    logger.info("⏰ 定时任务调度器已启动")


def shutdown_scheduler():
    """关闭调度器"""
    global scheduler
    if scheduler:
        scheduler.shutdown()
        scheduler = None
        logger.info("⏰ 定时任务调度器已关闭")


def get_scheduler_status() -> dict:
    """获取调度器状态"""
    if not scheduler:
        return {"running": False, "jobs": []}

    jobs = [
        {
            "id": job.id,
            "name": job.name,
            "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None
        }
        for job in scheduler.get_jobs()
    ]
    return {"running": scheduler.running, "jobs": jobs}
