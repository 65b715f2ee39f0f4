# =============================================================================
# 模块: main.py
# 功能: GoodPlace 后端的主入口文件
# 架构角色: 作为 FastAPI 应用的启动和编排中心，负责：
#   1. 初始化日志系统
#   2. 管理应用生命周期（建表、关闭连接池和 LLM 客户端）
#   3. 注册路由（用户、行为提交、健康检查）
#   4. 配置 CORS 中间件与全局异常处理
# =============================================================================
"""Main application entry point for GoodPlace."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apps.action import router as action_router
from apps.classifier import close_classifier
from apps.user import router as user_router
from common.logger import setup_logging
from core.database import check_db_connection, close_db, init_db
from settings import settings

setup_logging("DEBUG" if settings.debug else "INFO", None)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # ======================== 启动阶段 ========================
    logger.info("Starting GoodPlace...")

    if not await check_db_connection():
        logger.error("Database connection failed")
        raise RuntimeError("Cannot connect to database")

    await init_db()
    logger.info("GoodPlace started successfully")

    yield

    # ======================== 关闭阶段 ========================
    logger.info("Shutting down GoodPlace...")
    await close_classifier()
    await close_db()
    logger.info("GoodPlace shutdown complete")


app = FastAPI(
    title=settings.app_name,
    description="Classify everyday actions and keep score",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS：任意来源；预检请求回显 Access-Control-Request-Headers
_cors_origins = settings.cors_origins.split(",") if settings.cors_origins != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# 请求体不是 JSON 或字段类型不符时统一返回 400
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request body"},
    )


# 全局异常处理器：捕获所有未处理的异常，统一返回 500 和通用错误消息
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# =============================================================================
# 路由注册
# =============================================================================
app.include_router(user_router, prefix="/user")
app.include_router(action_router)


@app.get("/health")
async def health_check():
    """Health check endpoint with database status."""
    db_ok = await check_db_connection()
    return {
        "status": "healthy" if db_ok else "unhealthy",
        "components": {
            "database": "connected" if db_ok else "disconnected",
        },
    }


@app.get("/health/live")
async def liveness_check():
    """Liveness probe: the process is running."""
    return {"status": "alive"}


@app.get("/health/ready")
async def readiness_check():
    """Readiness probe: the database must be reachable."""
    if not await check_db_connection():
        raise HTTPException(status_code=503, detail="Database not ready")
    return {"status": "ready"}


def run() -> None:
    """Entry point for the ``goodplace`` console script (see pyproject.toml)."""
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Run the GoodPlace server")
    parser.add_argument("--host", type=str, default=None, help="Host to bind to")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    args = parser.parse_args()

    uvicorn.run(
        "main:app",
        host=args.host or settings.app_host,
        port=args.port or settings.app_port,
        reload=args.reload or settings.debug,
    )


if __name__ == "__main__":
    run()
