from typing import Callable

from app.infrastructure.external.health_checker.probe_health_checker import (
    ProbeHealthChecker,
)
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession


class PostgresHealthChecker(ProbeHealthChecker):
    """元数据库健康检查器，对外服务名为db"""

    service_name = "db"

    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self._session_factory = session_factory

    async def probe(self) -> None:
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))
