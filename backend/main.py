#!/usr/bin/env python3
"""
辩论直播管理后台 - 后端主入口
"""

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from debate_live.core.config import settings
from debate_live.core.logging import setup_logging
from debate_live.api import api_router
from debate_live.api.dependencies import get_live_coordinator
from debate_live.core.database import init_db

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="辩论直播投票、直播控制与实时推送后端API",
    version=settings.VERSION
)

# CORS设置
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册API路由
app.include_router(api_router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    """应用启动时的初始化"""
    setup_logging(settings)
    logger.info(f"🚀 启动{settings.APP_NAME}...")
    await init_db()

    # 从数据库恢复各直播流的当前票数
    try:
        get_live_coordinator().ledger.warm_up()
    except Exception:
        logger.exception("⚠️ 恢复票数失败，将以 0 票启动")


@app.on_event("shutdown")
async def shutdown_event():
    await get_live_coordinator().shutdown()
    logger.info("👋 服务已停止")


@app.get("/")
async def root():
    """根路径健康检查"""
    return {"message": f"{settings.APP_NAME}运行中", "status": "healthy"}


@app.get("/health")
async def health_check():
    """健康检查端点"""
    return {"status": "healthy", "service": "debate-live"}


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
