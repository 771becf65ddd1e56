from typing import Protocol

from app.domain.models.notification import Notification


class NotificationSink(Protocol):
    """通知出口协议(邮件等)"""

    async def send(self, notification: Notification) -> None:
        """发送通知，失败时抛出异常"""
        ...
