from typing import Protocol


class ImageProcessor(Protocol):
    """图片处理协议"""

    async def resize(self, data: bytes, width: int) -> bytes:
        """按指定宽度等比缩放图片，返回缩放后的字节"""
        ...
