from alembic import context
from app.infrastructure.models import Base
from sqlalchemy import engine_from_config, pool

# Alembic配置对象，日志由应用的setup_logging统一配置
config = context.config

# 用于autogenerate的元数据
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """离线模式下运行迁移，只输出SQL不连接数据库"""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """在线模式下运行迁移"""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
