from typing import List, Optional

from app.domain.models.file import File
from app.domain.repositories.file_repository import FileRepository
from app.infrastructure.models import FileModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession


class DBFileRepository(FileRepository):
    """基于数据库的文件数据仓库"""

    def __init__(self, db_session: AsyncSession) -> None:
        """构造函数，完成数据仓库初始化"""
        self.db_session = db_session

    async def save(self, file: File) -> None:
        """根据传递的文件模型存储or更新数据"""
        # 1.根据id查询记录是否存在
        stmt = select(FileModel).where(FileModel.id == file.id)
        result = await self.db_session.execute(stmt)
        record = result.scalar_one_or_none()

        # 2.判断如果文件不存在则新建文件
        if not record:
            record = FileModel.from_domain(file)
            self.db_session.add(record)
            await self.db_session.flush()
            return

        # 3.文件存在则直接更新文件
        record.update_from_domain(file)
        await self.db_session.flush()

    async def get_by_id(self, file_id: str) -> Optional[File]:
        """根据传递的文件id获取文件信息"""
        stmt = select(FileModel).where(FileModel.id == file_id)
        result = await self.db_session.execute(stmt)
        record = result.scalar_one_or_none()
        return record.to_domain() if record is not None else None

    async def get_by_id_and_owner(self, file_id: str, user_id: str) -> Optional[File]:
        """根据文件id+所属用户id获取文件信息"""
        stmt = select(FileModel).where(
            FileModel.id == file_id,
            FileModel.user_id == user_id,
        )
        result = await self.db_session.execute(stmt)
        record = result.scalar_one_or_none()
        return record.to_domain() if record is not None else None

    async def list_by_parent(
        self,
        user_id: str,
        parent_id: Optional[str],
        skip: int = 0,
        limit: int = 20,
    ) -> List[File]:
        """按id倒序分页获取用户在指定父级下的文件"""
        # 1.根目录使用NULL匹配，其余按父级id匹配
        parent_clause = (
            FileModel.parent_id.is_(None)
            if parent_id is None
            else FileModel.parent_id == parent_id
        )

        # 2.id单调递增，倒序即最新优先
        stmt = (
            select(FileModel)
            .where(FileModel.user_id == user_id, parent_clause)
            .order_by(FileModel.id.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self.db_session.execute(stmt)
        return [record.to_domain() for record in result.scalars().all()]

    async def count(self) -> int:
        """获取文件总数"""
        stmt = select(func.count()).select_from(FileModel)
        result = await self.db_session.execute(stmt)
        return result.scalar_one()
