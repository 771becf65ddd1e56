import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from app.domain.external.notification_sink import NotificationSink
from app.domain.models.notification import Notification

logger = logging.getLogger(__name__)


class SmtpNotificationSink(NotificationSink):
    """基于SMTP的邮件通知出口"""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 30.0,
    ) -> None:
        """构造函数，完成SMTP连接参数初始化"""
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    def _build_message(self, notification: Notification) -> MIMEMultipart:
        """构建HTML邮件"""
        message = MIMEMultipart("alternative")
        message["Subject"] = notification.subject
        message["From"] = self._sender
        message["To"] = notification.recipient
        message.attach(MIMEText(notification.html_body, "html", "utf-8"))
        return message

    def _send_sync(self, message: MIMEMultipart) -> None:
        """同步发送邮件"""
        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
            if self._use_tls:
                server.starttls()
            if self._username:
                server.login(self._username, self._password)
            server.send_message(message)

    async def send(self, notification: Notification) -> None:
        """在线程中发送邮件，失败时异常向上抛出由任务队列重试"""
        message = self._build_message(notification)
        try:
            await asyncio.to_thread(self._send_sync, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"发送邮件到[{notification.recipient}]失败: {str(e)}")
            raise
        logger.info(f"发送邮件到[{notification.recipient}]成功")
