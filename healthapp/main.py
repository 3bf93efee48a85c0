"""
HealthApp API主应用文件。

本文件是FastAPI应用的入口点，负责：
1. 创建FastAPI应用实例
2. 注册各个模块的路由
3. 注册业务异常到 HTTP 响应的转换
4. 启动时按配置建表
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .logging_config import setup_logging
from .config import is_auto_create_tables
from .errors import HealthAppError
from .utils import init_db

from .api.users import router as users_router
from .api.records import router as records_router
from .api.billboard import router as billboard_router

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if is_auto_create_tables():
        init_db()
        logger.info("[startup] tables ensured")
    yield


app = FastAPI(title="HealthApp API", lifespan=lifespan)


@app.exception_handler(HealthAppError)
async def handle_healthapp_error(request: Request, exc: HealthAppError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# 路由注册
app.include_router(users_router)
app.include_router(records_router)
app.include_router(billboard_router)
