import asyncio
import io
import logging

from app.domain.external.image_processor import ImageProcessor
from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)


class PillowImageProcessor(ImageProcessor):
    """基于Pillow的图片缩放，相同输入总是得到相同输出"""

    def __init__(self, default_format: str = "PNG") -> None:
        """构造函数，default_format用于无法识别原图格式时的输出格式"""
        self._default_format = default_format

    def _resize_sync(self, data: bytes, width: int) -> bytes:
        """同步完成解码、等比缩放、编码，无法识别的图片抛出ValueError"""
        try:
            image = Image.open(io.BytesIO(data))
        except UnidentifiedImageError as e:
            raise ValueError("无法识别的图片格式") from e

        with image:
            image_format = image.format or self._default_format
            image = ImageOps.exif_transpose(image)

            # 1.按宽度等比计算高度，至少保留1像素
            height = max(1, round(image.height * width / image.width))
            resized = image.resize((width, height), Image.Resampling.LANCZOS)

            # 2.JPEG不支持透明通道，需要先转换为RGB
            if image_format.upper() in ("JPEG", "JPG") and resized.mode not in ("RGB", "L"):
                resized = resized.convert("RGB")

            buffer = io.BytesIO()
            resized.save(buffer, format=image_format)
            return buffer.getvalue()

    async def resize(self, data: bytes, width: int) -> bytes:
        """在线程中执行缩放，避免阻塞事件循环"""
        result = await asyncio.to_thread(self._resize_sync, data, width)
        logger.debug(f"图片缩放完成, 宽度: {width}, 大小: {len(result)} bytes")
        return result
