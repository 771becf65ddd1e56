"""后台任务进程：消费缩略图生成与欢迎邮件两个任务队列

运行方式: python -m app.worker
"""

import asyncio
import logging
import os
import signal
import socket

from app.application.services.job_worker import JobWorker
from app.application.services.thumbnail_service import ThumbnailService
from app.application.services.welcome_service import WelcomeService
from app.domain.external.notification_sink import NotificationSink
from app.infrastructure.external.file_storage.local_file_storage import LocalFileStorage
from app.infrastructure.external.image.pillow_image_processor import (
    PillowImageProcessor,
)
from app.infrastructure.external.message_queue.redis_stream_job_queue import (
    RedisStreamJobQueue,
)
from app.infrastructure.external.notification.logging_notification_sink import (
    LoggingNotificationSink,
)
from app.infrastructure.external.notification.smtp_notification_sink import (
    SmtpNotificationSink,
)
from app.infrastructure.logging import setup_logging
from app.infrastructure.storage.postgres import get_postgres, get_uow
from app.infrastructure.storage.redis import RedisClient, get_redis
from core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def build_notification_sink(settings: Settings) -> NotificationSink:
    """未配置smtp_host时欢迎邮件只写入日志"""
    if not settings.smtp_host:
        return LoggingNotificationSink()
    return SmtpNotificationSink(
        host=settings.smtp_host,
        port=settings.smtp_port,
        sender=settings.mail_sender,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
    )


def build_workers(settings: Settings, redis_client: RedisClient) -> list[JobWorker]:
    """构建两个任务族的消费者"""
    consumer_name = settings.worker_consumer_name or f"{socket.gethostname()}-{os.getpid()}"
    file_storage = LocalFileStorage(settings.folder_path)

    thumbnail_queue = RedisStreamJobQueue(
        settings.thumbnail_queue_name,
        redis_client,
        group_name=settings.worker_group_name,
        claim_idle_ms=settings.worker_claim_idle_ms,
    )
    welcome_queue = RedisStreamJobQueue(
        settings.welcome_queue_name,
        redis_client,
        group_name=settings.worker_group_name,
        claim_idle_ms=settings.worker_claim_idle_ms,
    )

    thumbnail_service = ThumbnailService(
        uow_factory=get_uow,
        file_storage=file_storage,
        image_processor=PillowImageProcessor(),
    )
    welcome_service = WelcomeService(
        uow_factory=get_uow,
        notification_sink=build_notification_sink(settings),
    )

    return [
        JobWorker(
            queue=thumbnail_queue,
            handler=thumbnail_service.handle,
            consumer_name=consumer_name,
            block_ms=settings.worker_block_ms,
            max_deliveries=settings.worker_max_deliveries,
        ),
        JobWorker(
            queue=welcome_queue,
            handler=welcome_service.handle,
            consumer_name=consumer_name,
            block_ms=settings.worker_block_ms,
            max_deliveries=settings.worker_max_deliveries,
        ),
    ]


async def run_workers() -> None:
    settings = get_settings()

    # 1.初始化Redis与Postgres客户端
    redis_client = get_redis()
    await redis_client.init()
    postgres_client = get_postgres()
    await postgres_client.init()

    # 2.注册退出信号，收到信号后当前任务处理完再退出
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            logger.warning(f"当前平台不支持注册信号处理器: {sig}")

    try:
        workers = build_workers(settings, redis_client)
        for worker in workers:
            await worker.queue.ensure_group()

        logger.info("后台任务进程已启动")
        await asyncio.gather(*(worker.run(stop_event) for worker in workers))
    finally:
        await redis_client.shutdown()
        await postgres_client.shutdown()
        logger.info("后台任务进程已退出")


def main() -> None:
    setup_logging()
    asyncio.run(run_workers())


if __name__ == "__main__":
    main()
