from typing import Optional

from app.application.errors.exceptions import ConflictError
from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.models import UserModel
from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession


class DBUserRepository(UserRepository):
    """基于数据库的用户数据仓库"""

    def __init__(self, db_session: AsyncSession) -> None:
        self.db_session = db_session

    async def _first(self, stmt: Select) -> Optional[User]:
        result = await self.db_session.execute(stmt)
        record = result.scalar_one_or_none()
        return record.to_domain() if record else None

    async def create(self, user: User) -> User:
        """写入新用户，并发注册同一邮箱时由唯一约束兜底"""
        record = UserModel.from_domain(user)
        self.db_session.add(record)
        try:
            await self.db_session.flush()
        except IntegrityError as e:
            raise ConflictError() from e
        return record.to_domain()

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return await self._first(select(UserModel).where(UserModel.id == user_id))

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self._first(select(UserModel).where(UserModel.email == email))

    async def count(self) -> int:
        result = await self.db_session.execute(select(func.count(UserModel.id)))
        return result.scalar_one()
