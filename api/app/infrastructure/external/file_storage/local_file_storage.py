import asyncio
import logging
import os
import tempfile
import uuid
from pathlib import Path
from typing import Optional

from app.application.errors.exceptions import ContentNotFoundError
from app.domain.external.file_storage import FileStorage
from app.domain.models.file import THUMBNAIL_WIDTHS

logger = logging.getLogger(__name__)


class LocalFileStorage(FileStorage):
    """基于本地磁盘的文件内容存储，文件名为生成的uuid，缩略图追加 _<宽度> 后缀"""

    def __init__(self, root_dir: str) -> None:
        """构造函数，完成存储根目录的初始化(目录在首次写入时创建)"""
        self.root_dir = Path(root_dir)

    def path_for(self, content_ref: str, width: Optional[int] = None) -> Path:
        """根据内容引用和宽度计算磁盘路径"""
        # 内容引用只能是生成的文件名，避免拼接出根目录之外的路径
        if not content_ref or Path(content_ref).name != content_ref:
            raise ContentNotFoundError(content_ref)
        filename = content_ref if width is None else f"{content_ref}_{width}"
        return self.root_dir / filename

    @staticmethod
    def _write_atomic(path: Path, data: bytes) -> None:
        """先写临时文件再替换，重复写入同一位置时不会留下半截文件"""
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
        try:
            with os.fdopen(fd, "wb") as tmp_file:
                tmp_file.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    async def put(self, data: bytes) -> str:
        """写入原始字节并返回新生成的内容引用"""
        content_ref = str(uuid.uuid4())
        path = self.path_for(content_ref)
        try:
            await asyncio.to_thread(self._write_atomic, path, data)
        except OSError as e:
            logger.error(f"写入文件内容失败[{path}]: {str(e)}")
            raise
        logger.info(f"文件内容写入成功: {path} ({len(data)} bytes)")
        return content_ref

    async def get(self, content_ref: str, width: Optional[int] = None) -> bytes:
        """读取原图或指定宽度的缩略图"""
        path = self.path_for(content_ref, width)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            raise ContentNotFoundError(content_ref)
        except OSError as e:
            # 读取路径上的IO错误对外统一表现为未找到
            logger.error(f"读取文件内容失败[{path}]: {str(e)}")
            raise ContentNotFoundError(content_ref) from e

    async def put_derivative(self, content_ref: str, width: int, data: bytes) -> None:
        """写入(覆盖)指定宽度的缩略图"""
        path = self.path_for(content_ref, width)
        await asyncio.to_thread(self._write_atomic, path, data)
        logger.info(f"缩略图写入成功: {path}")

    async def delete(self, content_ref: str) -> None:
        """删除原图及其缩略图，不存在时忽略"""
        paths = [self.path_for(content_ref)]
        paths.extend(self.path_for(content_ref, width) for width in THUMBNAIL_WIDTHS)

        def _unlink_all() -> None:
            for path in paths:
                path.unlink(missing_ok=True)

        await asyncio.to_thread(_unlink_all)
        logger.info(f"文件内容删除成功: {content_ref}")
