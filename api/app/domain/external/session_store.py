from typing import Optional, Protocol


class SessionStore(Protocol):
    """临时会话存储协议：令牌 -> 用户id，带固定有效期"""

    async def create(self, user_id: str) -> str:
        """为用户创建会话并返回令牌"""
        ...

    async def resolve(self, token: str) -> Optional[str]:
        """根据令牌获取用户id，过期或不存在返回None"""
        ...

    async def revoke(self, token: str) -> None:
        """删除会话，令牌不存在时不做任何处理"""
        ...
