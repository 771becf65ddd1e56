"""启动时将元数据库迁移到最新版本

Alembic使用同步驱动psycopg2，连接串由应用的asyncpg连接串转换而来。
"""

import logging
from pathlib import Path
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from alembic import command
from alembic.config import Config
from core.config import Settings, get_settings

logger = logging.getLogger(__name__)

ALEMBIC_INI = Path(__file__).resolve().parents[3] / "alembic.ini"


def to_sync_database_url(url: str, connect_timeout: int = 5) -> str:
    """asyncpg连接串 -> psycopg2连接串，并补充连接超时"""
    parsed = urlparse(url)
    if parsed.scheme == "postgresql+asyncpg":
        parsed = parsed._replace(scheme="postgresql+psycopg2")

    query = dict(parse_qsl(parsed.query))
    query.setdefault("connect_timeout", str(connect_timeout))
    return urlunparse(parsed._replace(query=urlencode(query)))


def mask_password(url: str) -> str:
    parsed = urlparse(url)
    if parsed.password is None:
        return url
    netloc = parsed.netloc.rsplit("@", 1)[-1]
    return urlunparse(parsed._replace(netloc=f"{parsed.username or ''}:***@{netloc}"))


def upgrade_to_head(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    database_url = to_sync_database_url(settings.sqlalchemy_database_url)

    config = Config(str(ALEMBIC_INI))
    config.set_main_option("sqlalchemy.url", database_url)

    logger.info(f"数据库迁移开始: {mask_password(database_url)}")
    command.upgrade(config, "head")
    logger.info("数据库迁移完成")
