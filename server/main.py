#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FastAPI 应用主入口
"""

import json
import logging
import os
import sys
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response


# 自定义UTF-8 JSONResponse类，确保中文正确编码 + 强制不缓存
class UTF8JSONResponse(Response):
    media_type = "application/json; charset=utf-8"

    def __init__(self, content, **kwargs):
        super().__init__(content, **kwargs)
        self.headers["Cache-Control"] = "no-cache, no-store, must-revalidate, max-age=0"
        self.headers["Pragma"] = "no-cache"
        self.headers["Expires"] = "0"

    def render(self, content) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,  # 不转义非ASCII字符
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
        ).encode("utf-8")


# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

# 优先加载 .env 文件（必须在读取配置之前）
env_path = os.path.join(project_root, '.env')
if os.path.exists(env_path):
    load_dotenv(env_path, override=True)

from server.config.app_config import get_config  # noqa: E402

config = get_config()

# 配置日志（必须在导入路由之前初始化）
logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from core.calculators.ziwei_rules import get_interpretation_index  # noqa: E402
from server.api.v1.ziwei import router as ziwei_router  # noqa: E402
from server.utils.exception_handler import register_exception_handlers  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # 启动时预加载断语知识库，避免首个请求承担构建开销
    index = get_interpretation_index()
    logger.info(f"✓ 服务启动: env={config.env}, 断语索引 {len(index)} 条")
    yield
    logger.info("✓ 服务已停止")


app = FastAPI(
    title="PurpleStar Ziwei API",
    description="紫微斗数排盘与解盘API服务",
    version="1.0.0",
    lifespan=lifespan,
    default_response_class=UTF8JSONResponse,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(ziwei_router, prefix="/api/v1", tags=["紫微斗数"])


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "env": config.env,
    }


# 健康检查别名（部署脚本使用）
@app.get("/api/v1/health")
def health_check_api():
    return health_check()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "server.main:app",
        host="0.0.0.0",
        port=8001,
        reload=config.debug,
        workers=1,
    )
