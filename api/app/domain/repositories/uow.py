from abc import ABC, abstractmethod

from .file_repository import FileRepository
from .user_repository import UserRepository


class IUnitOfWork(ABC):
    """一次元数据读写的作用域，正常退出时提交，出现异常时回滚

    提交失败需要向上抛出，上传流程据此删除已经写入的文件内容。
    """

    file: FileRepository
    user: UserRepository

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...

    @abstractmethod
    async def __aenter__(self) -> "IUnitOfWork":
        ...

    @abstractmethod
    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        ...
