import logging
from functools import lru_cache
from typing import Optional

from core.config import Settings, get_settings
from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class RedisClient:
    """Redis连接的生命周期管理

    会话令牌(auth_<token>)与两个任务流共用这一个连接，
    API进程在lifespan中、后台任务进程在启动时各自init一次。
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings: Settings = settings or get_settings()
        self._client: Optional[Redis] = None

    def _create_client(self) -> Redis:
        return Redis(
            host=self._settings.redis_host,
            port=self._settings.redis_port,
            db=self._settings.redis_db,
            password=self._settings.redis_password,
            decode_responses=True,  # 会话值与流字段都按字符串处理
            socket_connect_timeout=5,
            health_check_interval=30,
        )

    async def init(self) -> None:
        if self._client is not None:
            logger.warning("Redis客户端已初始化，跳过重复初始化。")
            return

        address = f"{self._settings.redis_host}:{self._settings.redis_port}/{self._settings.redis_db}"
        client = self._create_client()
        try:
            await client.ping()
        except Exception as e:
            logger.error(f"连接Redis[{address}]失败: {e}")
            await client.aclose()
            raise

        self._client = client
        logger.info(f"Redis客户端初始化成功: {address}")

    async def shutdown(self) -> None:
        client, self._client = self._client, None
        if client is None:
            logger.warning("Redis客户端未初始化，无需关闭。")
        else:
            await client.aclose()
            logger.info("Redis客户端连接已关闭。")

        # 下一次get_redis()拿到全新的实例
        get_redis.cache_clear()

    @property
    def client(self) -> Redis:
        if self._client is None:
            raise RuntimeError("Redis客户端未初始化，请先调用init方法进行初始化。")
        return self._client


@lru_cache()
def get_redis() -> RedisClient:
    """进程内共享的Redis客户端"""
    return RedisClient()
