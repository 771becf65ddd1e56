from typing import Optional, Protocol


class FileStorage(Protocol):
    """文件内容存储协议，按生成的引用存取原始字节"""

    async def put(self, data: bytes) -> str:
        """写入原始字节并返回新生成的内容引用"""
        ...

    async def get(self, content_ref: str, width: Optional[int] = None) -> bytes:
        """读取原图或指定宽度的缩略图，不存在时抛出ContentNotFoundError"""
        ...

    async def put_derivative(self, content_ref: str, width: int, data: bytes) -> None:
        """写入(覆盖)指定宽度的缩略图"""
        ...

    async def delete(self, content_ref: str) -> None:
        """删除原图及其缩略图，不存在时忽略"""
        ...
