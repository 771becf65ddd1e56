from typing import Optional, Protocol

from app.domain.models.job import Job, JobDelivery


class JobQueue(Protocol):
    """持久化任务队列协议，至少一次投递，每个任务族一个队列"""

    @property
    def name(self) -> str:
        """只读属性，返回队列名字"""
        ...

    async def ensure_group(self) -> None:
        """确保消费者组存在"""
        ...

    async def enqueue(self, job: Job) -> str:
        """写入一条任务，持久化完成后返回消息id"""
        ...

    async def reserve(
        self, consumer: str, block_ms: Optional[int] = None
    ) -> Optional[JobDelivery]:
        """领取一条任务，优先重新领取超时未确认的任务"""
        ...

    async def ack(self, message_id: str) -> None:
        """确认任务完成并从队列中移除"""
        ...

    async def dead_letter(self, delivery: JobDelivery, reason: str) -> None:
        """将任务转入失败队列并确认，不再重试"""
        ...
