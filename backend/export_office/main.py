from contextlib import asynccontextmanager
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from export_office.api.api import api_router
from export_office.core.config import settings
from export_office.core.exceptions import ExportOfficeError
from export_office.core.logging_config import setup_logging, get_logger
from export_office.services.scheduler import init_scheduler, shutdown_scheduler
from export_office.db.session import SessionLocal
from export_office.db.init_db import ensure_tables_exist, ensure_base_data
from export_office.schemas.common import ErrorResponse

# 初始化日志系统
log_level = os.getenv("LOG_LEVEL", "INFO")
setup_logging(log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info("🚀 应用启动中...")

    await ensure_tables_exist()
    logger.info("📊 数据库表已就绪")

    async with SessionLocal() as db:
        result = await ensure_base_data(db)
    for item in result["created"]:
        logger.info(f"   ✅ 基础数据: {item}")

    init_scheduler()
    yield
    logger.info("🛑 应用关闭中...")
    shutdown_scheduler()


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    description="车辆出口后台 - 发票、物流、订舱、流水账",
    lifespan=lifespan
)

# CORS配置
if settings.BACKEND_CORS_ORIGINS:
    logger.info(f"配置CORS，允许的源: {settings.BACKEND_CORS_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def error_response(status_code: int, message: str, error: str = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message, error=error or message).model_dump()
    )


@app.exception_handler(ExportOfficeError)
async def export_office_error_handler(request: Request, exc: ExportOfficeError):
    logger.warning(f"{request.method} {request.url.path} → {exc.status_code}: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.error)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """请求校验失败统一返回 400，只报告第一个字段"""
    errors = exc.errors()
    if not errors:
        return error_response(400, "Invalid request")

    first = errors[0]
    if first.get("type") == "json_invalid":
        return error_response(400, "Invalid JSON body", first.get("ctx", {}).get("error") or first.get("msg"))

    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    if first.get("type") == "missing":
        if not field:
            return error_response(400, "Request body is required", first.get("msg"))
        message = f"Missing required field: {field}"
    else:
        message = f"Invalid value for {field}: {first.get('msg', '')}" if field else first.get("msg", "Invalid request")
    return error_response(400, message, first.get("msg"))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"未处理的异常: {request.method} {request.url.path}")
    return error_response(500, "Unexpected server error occurred", str(exc))


logger.info(f"注册API路由，前缀: {settings.API_PREFIX}")
app.include_router(api_router, prefix=settings.API_PREFIX)

# 上传的图片
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")


@app.get("/")
async def root():
    return {"message": settings.PROJECT_NAME}


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")
