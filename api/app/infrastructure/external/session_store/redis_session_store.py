import logging
from typing import Optional

from app.domain.external.session_store import SessionStore
from app.infrastructure.storage.redis import RedisClient
from core.security import create_session_token

logger = logging.getLogger(__name__)


class RedisSessionStore(SessionStore):
    """基于Redis的会话存储，过期由Redis的TTL负责"""

    def __init__(self, redis_client: RedisClient, ttl_seconds: int = 24 * 60 * 60) -> None:
        """构造函数，完成会话存储初始化"""
        self._redis = redis_client
        self._ttl_seconds = ttl_seconds

    @staticmethod
    def _key(token: str) -> str:
        """构建会话在Redis中的键"""
        return f"auth_{token}"

    async def create(self, user_id: str) -> str:
        """为用户创建会话并返回令牌"""
        token = create_session_token()
        await self._redis.client.set(self._key(token), user_id, ex=self._ttl_seconds)
        logger.debug(f"创建会话成功, 用户id: {user_id}")
        return token

    async def resolve(self, token: str) -> Optional[str]:
        """根据令牌获取用户id"""
        if not token:
            return None
        return await self._redis.client.get(self._key(token))

    async def revoke(self, token: str) -> None:
        """删除会话"""
        if not token:
            return
        await self._redis.client.delete(self._key(token))
