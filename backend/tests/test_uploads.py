"""图片上传测试"""
import base64
import os

import pytest

from export_office.core.config import settings
from export_office.core.exceptions import ValidationError
from export_office.services.uploads import decode_image

pytestmark = pytest.mark.anyio

PNG = base64.b64encode(b"\x89PNG\r\n\x1a\nfake").decode()


class TestDecode:
    """图片解析"""

    def test_data_url(self):
        content, extension = decode_image(f"data:image/png;base64,{PNG}")
        assert content.startswith(b"\x89PNG")
        assert extension == ".png"

    def test_plain_base64(self):
        assert decode_image(PNG)[1] == ".jpg"

    def test_invalid(self):
        with pytest.raises(ValidationError):
            decode_image("not base64!!")

    def test_unsupported_type(self):
        with pytest.raises(ValidationError):
            decode_image(f"data:application/pdf;base64,{PNG}")


class TestUploadApi:
    """上传接口"""

    async def test_upload(self, client, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
        response = await client.post("/api/admin/uploads/", json={"image": f"data:image/png;base64,{PNG}"})
        assert response.status_code == 200

        image_url = response.json()["data"]["image_url"]
        assert image_url.startswith("/uploads/") and image_url.endswith(".png")
        assert os.path.exists(os.path.join(str(tmp_path), os.path.basename(image_url)))

    async def test_upload_invalid(self, client, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
        response = await client.post("/api/admin/uploads/", json={"image": "%%%"})
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid base64 image data"
