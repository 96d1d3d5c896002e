"""管理员API"""
import logging
from typing import Any
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from export_office.core.deps import get_db
from export_office.core.exceptions import DuplicateError
from export_office.models import Admin
from export_office.schemas.admin import AdminCreate, AdminResponse
from export_office.schemas.common import ok

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def list_admins(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    result = await db.execute(select(Admin).order_by(Admin.id))
    return ok("Admins fetched successfully", [AdminResponse.model_validate(a) for a in result.scalars().all()])


@router.post("/", status_code=201)
async def create_admin(
    *,
    db: AsyncSession = Depends(get_db),
    admin_in: AdminCreate) -> Any:
    existing = await db.execute(select(Admin.id).where(Admin.username == admin_in.username))
    if existing.scalar():
        raise DuplicateError("Username already exists", f"Duplicate username {admin_in.username}")

    admin = Admin(**admin_in.model_dump())
    db.add(admin)
    await db.commit()
    await db.refresh(admin)
    logger.info(f"👤 新增管理员: {admin.username}")

    return ok("Admin created successfully", AdminResponse.model_validate(admin))


@router.get("/{admin_id}")
async def get_admin(
    *,
    db: AsyncSession = Depends(get_db),
    admin_id: int) -> Any:
    admin = await db.get(Admin, admin_id)
    if not admin:
        raise HTTPException(status_code=404, detail="Admin not found")
    return ok("Admin fetched successfully", AdminResponse.model_validate(admin))
