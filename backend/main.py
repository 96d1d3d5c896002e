import os

import uvicorn

if __name__ == "__main__":
    # 开发环境默认热重载，RELOAD=0 关闭
    reload = os.getenv("RELOAD", "1") != "0"

    uvicorn.run(
        "export_office.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=reload,
        log_level="info",
        app_dir=os.path.dirname(os.path.abspath(__file__)),
    )
