from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    PrimaryKeyConstraint,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from ...domain.models.file import File, FileType
from ...domain.models.identifier import generate_object_id
from .base import Base


class FileModel(Base):
    """文件元数据ORM模型"""

    __tablename__ = "files"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="pk_files_id"),
        # 优化按用户+父级的分页列表查询
        Index("ix_files_user_id_parent_id_id", "user_id", "parent_id", "id"),
    )

    id: Mapped[str] = mapped_column(
        String(24),
        nullable=False,
        primary_key=True,
        default=generate_object_id,
    )  # 文件id
    user_id: Mapped[str] = mapped_column(
        String(24),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )  # 文件所属用户ID
    name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )  # 文件名字
    type: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
    )  # 文件类型: folder/file/image
    is_public: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("false"),
    )  # 是否公开
    parent_id: Mapped[Optional[str]] = mapped_column(
        String(24),
        nullable=True,
    )  # 父文件夹id，NULL表示根目录
    content_ref: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )  # 本地存储中的内容引用
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        onupdate=datetime.now,
        server_default=text("CURRENT_TIMESTAMP(0)"),
    )  # 更新时间
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP(0)"),
    )  # 创建时间

    @classmethod
    def from_domain(cls, file: File) -> "FileModel":
        """从领域模型创建ORM模型"""
        return cls(
            id=file.id,
            user_id=file.user_id,
            name=file.name,
            type=file.type.value,
            is_public=file.is_public,
            parent_id=file.parent_id,
            content_ref=file.content_ref,
            created_at=file.created_at,
            updated_at=file.updated_at,
        )

    def to_domain(self) -> File:
        """将ORM模型转换为领域模型"""
        return File(
            id=self.id,
            user_id=self.user_id,
            name=self.name,
            type=FileType(self.type),
            is_public=self.is_public,
            parent_id=self.parent_id,
            content_ref=self.content_ref,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def update_from_domain(self, file: File) -> None:
        """从领域模型更新数据，所属用户、类型、父级创建后不可变"""
        self.name = file.name
        self.is_public = file.is_public
        self.content_ref = file.content_ref
        self.updated_at = datetime.now()
