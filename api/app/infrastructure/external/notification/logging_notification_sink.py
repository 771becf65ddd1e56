import logging

from app.domain.external.notification_sink import NotificationSink
from app.domain.models.notification import Notification

logger = logging.getLogger(__name__)


class LoggingNotificationSink(NotificationSink):
    """未配置邮件服务时使用，只把通知写入日志"""

    async def send(self, notification: Notification) -> None:
        logger.info(f"通知[{notification.subject}]已投递给: {notification.recipient}")
