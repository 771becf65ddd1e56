import base64
import binascii
import logging
import mimetypes
from typing import Callable, List, Optional, Tuple

from app.application.errors.exceptions import (
    BadRequestError,
    FolderContentError,
    MissingFieldError,
    NotFoundError,
    ParentNotAFolderError,
    ParentNotFoundError,
)
from app.domain.external.file_storage import FileStorage
from app.domain.external.job_queue import JobQueue
from app.domain.models.file import File, FileType
from app.domain.models.identifier import is_object_id
from app.domain.models.job import GenerateThumbnailsJob
from app.domain.repositories.uow import IUnitOfWork
from app.domain.services.access import can_read

logger = logging.getLogger(__name__)

# 每页最多返回的文件数
FILES_PER_PAGE = 20


class FileService:
    """文件元数据与内容服务"""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        file_storage: FileStorage,
        thumbnail_queue: JobQueue,
    ) -> None:
        """构造函数，完成文件服务的初始化"""
        self.file_storage = file_storage
        self.thumbnail_queue = thumbnail_queue
        self._uow_factory = uow_factory

    async def _check_parent(self, uow: IUnitOfWork, parent_id: Optional[str]) -> None:
        """校验父级存在且为文件夹，根目录无需校验"""
        if parent_id is None:
            return
        parent = await uow.file.get_by_id(parent_id) if is_object_id(parent_id) else None
        if not parent:
            raise ParentNotFoundError()
        if not parent.is_folder():
            raise ParentNotAFolderError()

    async def create_folder(
        self,
        user_id: str,
        name: Optional[str],
        parent_id: Optional[str] = None,
        is_public: bool = False,
    ) -> File:
        """创建文件夹，文件夹没有内容"""
        if not name:
            raise MissingFieldError("name")

        async with self._uow_factory() as uow:
            await self._check_parent(uow, parent_id)
            folder = File(
                user_id=user_id,
                name=name,
                type=FileType.FOLDER,
                is_public=is_public,
                parent_id=parent_id,
            )
            await uow.file.save(folder)

        logger.info(f"文件夹创建成功: {folder.name} (ID: {folder.id})")
        return folder

    async def create_file(
        self,
        user_id: str,
        name: Optional[str],
        type: FileType,
        data: Optional[bytes],
        parent_id: Optional[str] = None,
        is_public: bool = False,
    ) -> File:
        """创建普通文件或图片：先写内容再写元数据，元数据失败时删除已写入的内容"""
        # 1.校验必填字段
        if not name:
            raise MissingFieldError("name")
        if type == FileType.FOLDER:
            raise ValueError("文件夹请使用create_folder创建")
        if not data:
            raise MissingFieldError("data")

        # 2.校验父级(写内容之前完成，避免无效请求写入磁盘)
        async with self._uow_factory() as uow:
            await self._check_parent(uow, parent_id)

        # 3.写入文件内容，失败直接向上抛出，此时没有任何元数据
        content_ref = await self.file_storage.put(data)

        # 4.写入元数据，失败时回滚已写入的内容
        file = File(
            user_id=user_id,
            name=name,
            type=type,
            is_public=is_public,
            parent_id=parent_id,
            content_ref=content_ref,
        )
        try:
            async with self._uow_factory() as uow:
                await uow.file.save(file)
        except Exception:
            logger.error(f"保存文件[{name}]元数据失败，删除已写入的内容: {content_ref}")
            await self._rollback_content(content_ref)
            raise

        # 5.图片需要在后台生成缩略图，元数据已提交，投递失败只记录日志
        if file.is_image():
            await self._enqueue_thumbnails(file)

        logger.info(f"文件创建成功: {file.name} (ID: {file.id})")
        return file

    async def upload(
        self,
        user_id: str,
        name: Optional[str],
        type: Optional[str],
        data: Optional[str] = None,
        parent_id: Optional[str] = None,
        is_public: bool = False,
    ) -> File:
        """上传入口，按 名字 -> 类型 -> 内容 -> 父级 的顺序校验

        Args:
            user_id: 所属用户id
            name: 文件名
            type: 文件类型字符串(folder/file/image)
            data: Base64编码的文件内容，文件夹忽略
            parent_id: 父文件夹id，None表示根目录
            is_public: 是否公开

        Returns:
            File: 创建后的文件元数据
        """
        if not name:
            raise MissingFieldError("name")
        try:
            file_type = FileType(type)
        except ValueError:
            raise MissingFieldError("type")

        if file_type == FileType.FOLDER:
            return await self.create_folder(user_id, name, parent_id, is_public)

        if not data:
            raise MissingFieldError("data")
        try:
            raw = base64.b64decode(data)
        except (binascii.Error, ValueError):
            raise BadRequestError("Invalid data")

        return await self.create_file(user_id, name, file_type, raw, parent_id, is_public)

    async def _enqueue_thumbnails(self, file: File) -> None:
        try:
            await self.thumbnail_queue.enqueue(
                GenerateThumbnailsJob(file_id=file.id, user_id=file.user_id)
            )
        except Exception:
            logger.exception(f"投递缩略图任务失败，图片[{file.id}]将没有缩略图")

    async def _rollback_content(self, content_ref: str) -> None:
        """尽力删除孤立的文件内容，删除失败只记录日志，孤立内容不会被引用"""
        try:
            await self.file_storage.delete(content_ref)
        except Exception:
            logger.exception(f"删除孤立文件内容失败: {content_ref}")

    async def get(self, file_id: str) -> Optional[File]:
        """根据文件id获取文件，不做归属过滤"""
        if not is_object_id(file_id):
            return None
        async with self._uow_factory() as uow:
            return await uow.file.get_by_id(file_id)

    async def get_file_info(self, file_id: str, user_id: Optional[str]) -> File:
        """获取文件信息，无权读取时与不存在一样返回未找到"""
        file = await self.get(file_id)
        if not file or not can_read(user_id, file):
            raise NotFoundError()
        return file

    async def list_children(
        self, user_id: str, parent_id: Optional[str], page: int = 0
    ) -> List[File]:
        """分页获取用户在指定父级下的文件，父级不做存在性校验"""
        page = max(page, 0)
        async with self._uow_factory() as uow:
            return await uow.file.list_by_parent(
                user_id=user_id,
                parent_id=parent_id,
                skip=page * FILES_PER_PAGE,
                limit=FILES_PER_PAGE,
            )

    async def set_visibility(self, file_id: str, user_id: str, is_public: bool) -> File:
        """修改文件公开状态，仅所属用户可操作，其他情况一律返回未找到"""
        if not is_object_id(file_id):
            raise NotFoundError()
        async with self._uow_factory() as uow:
            file = await uow.file.get_by_id_and_owner(file_id, user_id)
            if not file:
                raise NotFoundError()
            file.is_public = is_public
            await uow.file.save(file)

            # 按所属用户重新读取，返回持久化后的数据
            updated = await uow.file.get_by_id_and_owner(file_id, user_id)

        if not updated:
            raise NotFoundError()
        return updated

    async def get_content(
        self,
        file_id: str,
        user_id: Optional[str],
        width: Optional[int] = None,
    ) -> Tuple[bytes, str]:
        """获取文件内容及mime-type，width为空时返回原图"""
        # 1.校验文件存在且有权读取
        file = await self.get_file_info(file_id, user_id)

        # 2.文件夹没有内容
        if file.is_folder() or not file.content_ref:
            raise FolderContentError()

        # 3.读取原图或缩略图，不存在时抛出ContentNotFoundError
        data = await self.file_storage.get(file.content_ref, width)
        mime_type = mimetypes.guess_type(file.name)[0] or "application/octet-stream"
        return data, mime_type
