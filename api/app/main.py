import logging
from contextlib import asynccontextmanager

from app.infrastructure.logging import setup_logging
from app.infrastructure.storage.migrations import upgrade_to_head
from app.infrastructure.storage.postgres import get_postgres
from app.infrastructure.storage.redis import get_redis
from app.interfaces.endpoints.routes import router as api_router
from app.interfaces.errors.exception_handlers import register_exception_handlers
from core.config import get_settings
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

settings = get_settings()

setup_logging()
logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "状态模块", "description": "服务可用性与用户/文件数量统计。"},
    {"name": "认证模块", "description": "Basic认证登录，X-Token会话登出。"},
    {"name": "用户模块", "description": "注册与当前用户信息。"},
    {"name": "文件模块", "description": "文件夹/文件/图片的上传、列表、公开状态与内容读取。"},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """启动时先迁移数据库再建立连接，关闭时按相反顺序释放"""
    upgrade_to_head(settings)

    redis_client = get_redis()
    postgres_client = get_postgres()
    await redis_client.init()
    await postgres_client.init()
    logger.info(f"Files Manager已启动(env={settings.env})")

    try:
        yield
    finally:
        await postgres_client.shutdown()
        await redis_client.shutdown()
        logger.info("Files Manager已关闭")


app = FastAPI(
    title="Files Manager",
    description="个人文件存储后端：会话认证、文件夹/文件/图片元数据、本地内容存储，缩略图与欢迎邮件由后台任务进程处理",
    version="1.0.0",
    lifespan=lifespan,
    openapi_tags=openapi_tags,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router)
