import logging

from app.application.services.auth_service import AuthService
from app.application.services.file_service import FileService
from app.application.services.status_service import StatusService
from app.infrastructure.external.file_storage.local_file_storage import LocalFileStorage
from app.infrastructure.external.health_checker.postgres_health_checker import (
    PostgresHealthChecker,
)
from app.infrastructure.external.health_checker.redis_health_checker import (
    RedisHealthChecker,
)
from app.infrastructure.external.message_queue.redis_stream_job_queue import (
    RedisStreamJobQueue,
)
from app.infrastructure.external.session_store.redis_session_store import (
    RedisSessionStore,
)
from app.infrastructure.storage.postgres import get_postgres, get_uow
from app.infrastructure.storage.redis import RedisClient, get_redis
from core.config import get_settings
from fastapi import Depends

logger = logging.getLogger(__name__)
settings = get_settings()


def get_status_service(
    redis_client: RedisClient = Depends(get_redis),
) -> StatusService:
    """获取状态服务"""
    # 1.初始化postgres和redis健康检查器，会话在检查时才创建，数据库未初始化时检查结果为失败
    postgres_checker = PostgresHealthChecker(
        session_factory=lambda: get_postgres().session_factory()
    )
    redis_checker = RedisHealthChecker(redis_client)

    # 2.创建服务并返回
    logger.debug("加载获取StatusService")
    return StatusService(
        checkers=[redis_checker, postgres_checker],
        uow_factory=get_uow,
    )


def get_auth_service(
    redis_client: RedisClient = Depends(get_redis),
) -> AuthService:
    """获取认证服务"""
    return AuthService(
        uow_factory=get_uow,
        session_store=RedisSessionStore(
            redis_client, ttl_seconds=settings.session_ttl_seconds
        ),
        welcome_queue=RedisStreamJobQueue(
            settings.welcome_queue_name,
            redis_client,
            group_name=settings.worker_group_name,
            claim_idle_ms=settings.worker_claim_idle_ms,
        ),
    )


def get_file_service(
    redis_client: RedisClient = Depends(get_redis),
) -> FileService:
    """获取文件服务"""
    # 1.初始化本地文件存储和缩略图任务队列
    file_storage = LocalFileStorage(settings.folder_path)
    thumbnail_queue = RedisStreamJobQueue(
        settings.thumbnail_queue_name,
        redis_client,
        group_name=settings.worker_group_name,
        claim_idle_ms=settings.worker_claim_idle_ms,
    )

    # 2.构建服务并返回
    return FileService(
        uow_factory=get_uow,
        file_storage=file_storage,
        thumbnail_queue=thumbnail_queue,
    )
