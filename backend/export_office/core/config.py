from typing import List, Union
import logging

from pydantic import AnyHttpUrl, Field, validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    PROJECT_NAME: str = "Vehicle Export Back Office"
    API_PREFIX: str = "/api/admin"

    # CORS配置
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # 数据库配置
    SQLITE_DATABASE_URI: str = "sqlite:///./export_office.db"

    # 图片上传目录（替代前端使用的外部上传服务）
    UPLOAD_DIR: str = "uploads"

    # 汇率接口配置（JPY → USD）
    EXCHANGE_RATE_API_URL: str = "https://v6.exchangerate-api.com/v6"
    EXCHANGE_RATE_API_KEY: str = Field(default="", description="exchangerate-api.com 密钥")
    EXCHANGE_RATE_TIMEOUT: float = 10.0
    EXCHANGE_RATE_TTL_SECONDS: int = 60 * 60  # 缓存1小时
    EXCHANGE_RATE_FALLBACK: float = 0.0067  # 接口不可用时的兜底汇率
    EXCHANGE_RATE_REFRESH_ENABLED: bool = True
    EXCHANGE_RATE_REFRESH_MINUTES: int = 30

    # 自动备份配置
    AUTO_BACKUP_ENABLED: bool = True  # 是否启用自动备份
    AUTO_BACKUP_HOUR: int = 3  # 每天备份时间（小时，0-23）
    AUTO_BACKUP_MINUTE: int = 0  # 每天备份时间（分钟，0-59）
    AUTO_BACKUP_KEEP_COUNT: int = 7  # 保留最近多少个自动备份

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
logger.info(f"加载配置: API_PREFIX={settings.API_PREFIX}, CORS={settings.BACKEND_CORS_ORIGINS}")
