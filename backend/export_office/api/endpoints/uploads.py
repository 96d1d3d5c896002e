"""图片上传API"""
from typing import Any
from fastapi import APIRouter

from export_office.schemas.common import ImageUpload, ok
from export_office.services.uploads import save_base64_image

router = APIRouter()


@router.post("/")
async def upload_image(image_in: ImageUpload) -> Any:
    """上传 base64 图片，返回 image_url"""
    image_url = save_base64_image(image_in.image)
    return ok("Image uploaded successfully", {"image_url": image_url})
