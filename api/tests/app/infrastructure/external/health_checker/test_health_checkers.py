import asyncio

from app.infrastructure.external.health_checker.postgres_health_checker import (
    PostgresHealthChecker,
)
from app.infrastructure.external.health_checker.redis_health_checker import (
    RedisHealthChecker,
)


class BrokenSession:
    async def __aenter__(self):
        raise ConnectionError("connection refused")

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


def test_redis_checker_reports_ok(redis_client) -> None:
    status = asyncio.run(RedisHealthChecker(redis_client).check())

    assert status.service == "redis"
    assert status.status == "ok"


def test_postgres_checker_reports_error_with_details() -> None:
    checker = PostgresHealthChecker(session_factory=BrokenSession)

    status = asyncio.run(checker.check())

    assert status.service == "db"
    assert status.status == "error"
    assert status.details == "connection refused"
