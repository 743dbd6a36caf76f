"""
FastAPI 主应用
"""
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from orderhub.api import documents_router, orders_router, session_router
from orderhub.core.config import get_settings
from orderhub.services.session_store import InMemorySessionStore

# 创建应用
settings = get_settings()

# 配置日志
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level=settings.LOG_LEVEL
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info(f"🚀 启动应用: {settings.APP_NAME}")
    logger.info(f"📝 环境: {settings.ENV}")
    logger.info(f"🛍️  WooCommerce 店铺: {settings.WOOCOMMERCE_STORE_URL}")
    yield
    logger.info("👋 关闭应用")


app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    lifespan=lifespan
)
app.state.session_store = InMemorySessionStore()

# 配置 CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(orders_router.router)
app.include_router(documents_router.router)
app.include_router(session_router.router)


@app.get("/")
async def root():
    """根路径"""
    return {
        "app": settings.APP_NAME,
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
async def health():
    """健康检查"""
    return {"status": "healthy"}
