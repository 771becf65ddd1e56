import logging
from functools import lru_cache
from typing import Optional

from app.domain.repositories.uow import IUnitOfWork
from app.infrastructure.repositories.db_uow import DBUnitOfWork
from core.config import Settings, get_settings
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

logger = logging.getLogger(__name__)


class Postgres:
    """元数据库(users/files两张表)的引擎与会话工厂"""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings: Settings = settings or get_settings()
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    def _create_engine(self) -> AsyncEngine:
        return create_async_engine(
            self._settings.sqlalchemy_database_url,
            # 只有DEBUG日志级别才输出SQL
            echo=self._settings.log_level.upper() == "DEBUG",
            pool_pre_ping=True,
        )

    async def init(self) -> None:
        """创建引擎并执行SELECT 1，数据库不可用时启动失败"""
        if self._engine is not None:
            logger.warning("Postgres数据库客户端已初始化，跳过重复初始化。")
            return

        engine = self._create_engine()
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Postgres数据库客户端初始化失败: {e}")
            await engine.dispose()
            raise

        self._engine = engine
        # 元数据在UoW退出时统一提交，flush由仓库显式调用
        self._session_factory = async_sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info("Postgres数据库客户端初始化成功。")

    async def shutdown(self) -> None:
        engine, self._engine = self._engine, None
        self._session_factory = None
        if engine is None:
            logger.warning("Postgres数据库客户端未初始化，无需关闭。")
        else:
            await engine.dispose()
            logger.info("Postgres数据库客户端连接已关闭。")

        get_postgres.cache_clear()

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise RuntimeError(
                "Postgres数据库客户端未初始化，请先调用init方法进行初始化。"
            )
        return self._session_factory


@lru_cache()
def get_postgres() -> Postgres:
    """进程内共享的Postgres客户端"""
    return Postgres()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return get_postgres().session_factory


def get_uow() -> IUnitOfWork:
    """每次调用返回一个新的UoW，服务层按操作创建"""
    return DBUnitOfWork(session_factory=get_session_factory())
