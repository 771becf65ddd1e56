from typing import List, Optional, Protocol

from app.domain.models.file import File


class FileRepository(Protocol):
    """文件元数据仓库"""

    async def save(self, file: File) -> None:
        """新增或更新文件信息"""
        ...

    async def get_by_id(self, file_id: str) -> Optional[File]:
        """根据传递的文件id获取文件信息，不做归属过滤"""
        ...

    async def get_by_id_and_owner(self, file_id: str, user_id: str) -> Optional[File]:
        """根据文件id+所属用户id获取文件信息"""
        ...

    async def list_by_parent(
        self,
        user_id: str,
        parent_id: Optional[str],
        skip: int = 0,
        limit: int = 20,
    ) -> List[File]:
        """按id倒序分页获取用户在指定父级下的文件，parent_id为None表示根目录"""
        ...

    async def count(self) -> int:
        """获取文件总数"""
        ...
