"""认证服务"""

import logging
from typing import Callable, Optional

from app.application.errors.exceptions import (
    ConflictError,
    MissingFieldError,
    UnauthorizedError,
)
from app.domain.external.job_queue import JobQueue
from app.domain.external.session_store import SessionStore
from app.domain.models.job import SendWelcomeJob
from app.domain.models.user import User
from app.domain.repositories.uow import IUnitOfWork
from core.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """认证服务，处理用户注册、登录、登出以及根据令牌解析当前用户"""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        session_store: SessionStore,
        welcome_queue: JobQueue,
    ) -> None:
        self._uow_factory = uow_factory
        self.session_store = session_store
        self.welcome_queue = welcome_queue

    async def register(self, email: Optional[str], password: Optional[str]) -> User:
        """用户注册，成功后投递欢迎邮件任务

        Args:
            email: 邮箱
            password: 密码

        Returns:
            User: 新创建的用户

        Raises:
            MissingFieldError: 邮箱或密码缺失
            ConflictError: 邮箱已被注册
        """
        # 参数校验
        if not email:
            raise MissingFieldError("email")
        if not password:
            raise MissingFieldError("password")

        # 检查邮箱是否已存在并创建用户
        async with self._uow_factory() as uow:
            if await uow.user.get_by_email(email):
                raise ConflictError()
            user = await uow.user.create(
                User(email=email, password_hash=get_password_hash(password))
            )

        # 提交成功后再投递任务，避免消费者读取不到用户
        await self.welcome_queue.enqueue(SendWelcomeJob(user_id=user.id))
        logger.info(f"User registered: {user.id}")
        return user

    async def login(self, email: str, password: str) -> str:
        """用户登录，校验邮箱+密码后创建会话并返回令牌

        Raises:
            UnauthorizedError: 用户不存在或密码错误
        """
        async with self._uow_factory() as uow:
            user = await uow.user.get_by_email(email)

        if not user or not verify_password(password, user.password_hash):
            raise UnauthorizedError()

        token = await self.session_store.create(user.id)
        logger.info(f"User logged in: {user.id}")
        return token

    async def logout(self, token: Optional[str]) -> None:
        """用户登出，令牌无效时返回未认证"""
        user_id = await self.session_store.resolve(token) if token else None
        if not user_id:
            raise UnauthorizedError()

        await self.session_store.revoke(token)
        logger.info(f"User logged out: {user_id}")

    async def get_current_user(self, token: Optional[str]) -> User:
        """根据会话令牌获取当前用户

        Raises:
            UnauthorizedError: 令牌缺失、过期或用户不存在
        """
        if not token:
            raise UnauthorizedError()

        user_id = await self.session_store.resolve(token)
        if not user_id:
            raise UnauthorizedError()

        async with self._uow_factory() as uow:
            user = await uow.user.get_by_id(user_id)
        if not user:
            raise UnauthorizedError()

        return user
