import asyncio
import logging
from typing import Optional

from app.domain.repositories.uow import IUnitOfWork
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .db_file_repository import DBFileRepository
from .db_user_repository import DBUserRepository

logger = logging.getLogger(__name__)


class DBUnitOfWork(IUnitOfWork):
    """一个数据库会话对应一次UoW，files与users仓库共享该会话"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self.db_session: Optional[AsyncSession] = None

    async def commit(self) -> None:
        await self.db_session.commit()

    async def rollback(self) -> None:
        await self.db_session.rollback()

    async def __aenter__(self) -> "DBUnitOfWork":
        self.db_session = self.session_factory()
        self.file = DBFileRepository(db_session=self.db_session)
        self.user = DBUserRepository(db_session=self.db_session)
        return self

    async def _finish(self, failed: bool) -> None:
        if failed:
            await self.rollback()
            return
        try:
            await self.commit()
        except Exception:
            # 提交失败向上抛出，上传流程据此清理已写入的文件内容
            logger.warning("UoW提交失败，执行回滚", exc_info=True)
            await self.rollback()
            raise

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            await self._finish(failed=exc_type is not None)
        except asyncio.CancelledError:
            logger.warning("UoW提交/回滚被取消(客户端可能已断开连接)")
            raise
        finally:
            try:
                await self.db_session.close()
            except Exception as e:
                logger.warning(f"UoW关闭数据库会话失败: {e}")
            self.db_session = None
