import logging
from typing import Callable, Optional

from app.application.errors.exceptions import FatalJobError
from app.application.services.job_worker import parse_job_payload
from app.domain.external.file_storage import FileStorage
from app.domain.external.image_processor import ImageProcessor
from app.domain.models.file import THUMBNAIL_WIDTHS
from app.domain.models.job import GenerateThumbnailsJob
from app.domain.repositories.uow import IUnitOfWork

logger = logging.getLogger(__name__)


class ThumbnailService:
    """缩略图生成服务，消费GenerateThumbnails任务"""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        file_storage: FileStorage,
        image_processor: ImageProcessor,
    ) -> None:
        self._uow_factory = uow_factory
        self.file_storage = file_storage
        self.image_processor = image_processor

    async def handle(self, data: Optional[str]) -> None:
        """任务处理入口，接收队列中的原始数据"""
        job = parse_job_payload(data, GenerateThumbnailsJob)
        await self.generate(job)

    async def generate(self, job: GenerateThumbnailsJob) -> None:
        """为图片生成所有宽度的缩略图，衍生文件名固定，重复执行会覆盖写入"""
        # 1.校验任务参数
        if not job.file_id:
            raise FatalJobError("Missing fileId")
        if not job.user_id:
            raise FatalJobError("Missing userId")

        # 2.按所属用户查询文件
        async with self._uow_factory() as uow:
            file = await uow.file.get_by_id_and_owner(job.file_id, job.user_id)
        if not file or not file.content_ref:
            raise FatalJobError("File not found")

        # 3.原图只读取一次，存储异常直接抛出等待重试
        original = await self.file_storage.get(file.content_ref)

        # 4.逐个宽度缩放并写入
        for width in THUMBNAIL_WIDTHS:
            try:
                thumbnail = await self.image_processor.resize(original, width)
            except ValueError as e:
                raise FatalJobError("Invalid image") from e
            await self.file_storage.put_derivative(file.content_ref, width, thumbnail)

        logger.info(f"文件[{file.id}]缩略图生成完成")
