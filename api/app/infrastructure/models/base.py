from sqlalchemy import MetaData
from sqlalchemy.orm import declarative_base

# 约束与索引的命名规则，迁移脚本中的名字与之保持一致，
# 例如 ix_files_user_id / uq_users_email / fk_files_user_id_users
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))
