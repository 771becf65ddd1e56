import logging
from typing import Callable, Optional

from app.application.errors.exceptions import FatalJobError, RetryableJobError
from app.application.services.job_worker import parse_job_payload
from app.domain.external.notification_sink import NotificationSink
from app.domain.models.job import SendWelcomeJob
from app.domain.models.notification import Notification
from app.domain.models.user import User
from app.domain.repositories.uow import IUnitOfWork

logger = logging.getLogger(__name__)

WELCOME_SUBJECT = "Welcome to Files Manager"


def build_welcome_notification(user: User) -> Notification:
    """构建欢迎邮件"""
    return Notification(
        recipient=user.email,
        subject=WELCOME_SUBJECT,
        html_body=(
            f"<p>Hello {user.email},</p>"
            "<p>Your Files Manager account is ready. "
            "Sign in to start uploading your files.</p>"
        ),
    )


class WelcomeService:
    """欢迎邮件服务，消费SendWelcome任务"""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        notification_sink: NotificationSink,
    ) -> None:
        self._uow_factory = uow_factory
        self.notification_sink = notification_sink

    async def handle(self, data: Optional[str]) -> None:
        job = parse_job_payload(data, SendWelcomeJob)
        await self.send(job)

    async def send(self, job: SendWelcomeJob) -> None:
        if not job.user_id:
            raise FatalJobError("Missing userId")

        async with self._uow_factory() as uow:
            user = await uow.user.get_by_id(job.user_id)
        if not user:
            raise FatalJobError("User not found")

        try:
            await self.notification_sink.send(build_welcome_notification(user))
        except Exception as e:
            raise RetryableJobError(f"发送欢迎邮件失败: {str(e)}") from e

        logger.info(f"用户[{user.id}]欢迎邮件已发送")
