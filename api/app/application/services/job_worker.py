import asyncio
import json
import logging
from typing import Awaitable, Callable, Optional, Type, TypeVar

from pydantic import ValidationError

from app.application.errors.exceptions import FatalJobError, JobError
from app.domain.external.job_queue import JobQueue
from app.domain.models.job import Job

logger = logging.getLogger(__name__)

JobHandler = Callable[[Optional[str]], Awaitable[None]]

J = TypeVar("J", bound=Job)


def parse_job_payload(data: Optional[str], job_cls: Type[J]) -> J:
    """解析队列消息中的任务数据，格式错误的任务无法通过重试修复"""
    if not data:
        raise FatalJobError("Empty job payload")
    try:
        return job_cls.model_validate(json.loads(data))
    except (ValueError, ValidationError) as e:
        raise FatalJobError(f"Invalid job payload: {str(e)}") from e


class JobWorker:
    """任务消费循环：领取、处理、确认或转入失败队列"""

    def __init__(
        self,
        queue: JobQueue,
        handler: JobHandler,
        consumer_name: str,
        block_ms: int = 5000,
        max_deliveries: int = 5,
    ) -> None:
        self.queue = queue
        self.handler = handler
        self.consumer_name = consumer_name
        self.block_ms = block_ms
        self.max_deliveries = max_deliveries

    async def run_once(self) -> bool:
        """处理一条任务，队列为空时返回False"""
        delivery = await self.queue.reserve(self.consumer_name, block_ms=self.block_ms)
        if delivery is None:
            return False

        # 超过最大投递次数的任务不再处理
        if delivery.delivery_count > self.max_deliveries:
            logger.warning(
                f"队列[{self.queue.name}]任务[{delivery.message_id}]"
                f"已投递{delivery.delivery_count}次，转入失败队列"
            )
            await self.queue.dead_letter(delivery, "retry limit exceeded")
            return True

        try:
            await self.handler(delivery.data)
        except JobError as e:
            if e.retryable:
                logger.warning(
                    f"队列[{self.queue.name}]任务[{delivery.message_id}]处理失败，等待重试: {e.msg}"
                )
            else:
                logger.error(
                    f"队列[{self.queue.name}]任务[{delivery.message_id}]处理失败: {e.msg}"
                )
                await self.queue.dead_letter(delivery, e.msg)
            return True
        except Exception as e:
            logger.exception(
                f"队列[{self.queue.name}]任务[{delivery.message_id}]出现异常，等待重试: {str(e)}"
            )
            return True

        await self.queue.ack(delivery.message_id)
        return True

    async def run(self, stop_event: asyncio.Event) -> None:
        """持续消费任务直到stop_event被设置"""
        logger.info(f"开始消费队列[{self.queue.name}]，消费者: {self.consumer_name}")
        while not stop_event.is_set():
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # 队列本身不可用时稍后重试
                logger.error(f"消费队列[{self.queue.name}]失败: {str(e)}")
                await asyncio.sleep(1)
        logger.info(f"停止消费队列[{self.queue.name}]")
