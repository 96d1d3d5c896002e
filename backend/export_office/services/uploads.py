"""
图片上传 - 保存前端传来的 base64 图片

支持纯 base64 字符串和 data URL（data:image/png;base64,...），
文件以随机名保存在 UPLOAD_DIR 下，返回可访问的相对地址
"""
import base64
import binascii
import logging
import os
import uuid

from export_office.core.config import settings
from export_office.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def decode_image(data: str):
    """解析图片数据，返回 (bytes, 扩展名)"""
    extension = ".jpg"
    if data.startswith("data:"):
        header, _, data = data.partition(",")
        mime = header[5:].split(";")[0].lower()
        if mime not in EXTENSIONS:
            raise ValidationError("Unsupported image type", mime or "missing mime type")
        extension = EXTENSIONS[mime]

    try:
        content = base64.b64decode(data.strip(), validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid base64 image data")
    if not content:
        raise ValidationError("Invalid base64 image data", "Image is empty")
    return content, extension


def save_base64_image(data: str, upload_dir: str = None) -> str:
    """保存图片，返回 /uploads/<文件名>"""
    content, extension = decode_image(data)
    upload_dir = upload_dir or settings.UPLOAD_DIR
    os.makedirs(upload_dir, exist_ok=True)

    filename = f"{uuid.uuid4().hex}{extension}"
    with open(os.path.join(upload_dir, filename), "wb") as f:
        f.write(content)

    logger.info(f"🖼️ 保存图片: {filename} ({len(content)} bytes)")
    return f"/uploads/{filename}"
