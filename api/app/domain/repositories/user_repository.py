from typing import Optional, Protocol

from app.domain.models.user import User


class UserRepository(Protocol):
    """用户仓库，邮箱全局唯一"""

    async def create(self, user: User) -> User:
        """新增用户，邮箱已被占用时抛出ConflictError"""
        ...

    async def get_by_id(self, user_id: str) -> Optional[User]:
        ...

    async def get_by_email(self, email: str) -> Optional[User]:
        """按邮箱精确查找，用于注册查重与登录"""
        ...

    async def count(self) -> int:
        """获取用户总数"""
        ...
