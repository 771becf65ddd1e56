from app.infrastructure.storage.migrations import (
    ALEMBIC_INI,
    mask_password,
    to_sync_database_url,
)


def test_async_url_is_converted_to_psycopg2_with_timeout() -> None:
    url = to_sync_database_url("postgresql+asyncpg://u:p@db:5432/files")

    assert url == "postgresql+psycopg2://u:p@db:5432/files?connect_timeout=5"


def test_existing_connect_timeout_is_kept() -> None:
    url = to_sync_database_url("postgresql+asyncpg://u:p@db/files?connect_timeout=30")

    assert url.endswith("connect_timeout=30")


def test_mask_password_hides_only_the_password() -> None:
    masked = mask_password("postgresql+psycopg2://u:secret@db:5432/files")

    assert masked == "postgresql+psycopg2://u:***@db:5432/files"
    assert mask_password("postgresql://db/files") == "postgresql://db/files"


def test_alembic_ini_is_shipped_next_to_the_app() -> None:
    assert ALEMBIC_INI.is_file()
