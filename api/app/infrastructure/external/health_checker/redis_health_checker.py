from app.infrastructure.external.health_checker.probe_health_checker import (
    ProbeHealthChecker,
)
from app.infrastructure.storage.redis import RedisClient


class RedisHealthChecker(ProbeHealthChecker):
    """会话与任务队列共用的Redis，PING成功即可用"""

    service_name = "redis"

    def __init__(self, redis_client: RedisClient) -> None:
        self._redis_client = redis_client

    async def probe(self) -> None:
        await self._redis_client.client.ping()
