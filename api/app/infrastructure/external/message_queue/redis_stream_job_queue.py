import logging
from typing import Any, Optional, Tuple

from app.domain.external.job_queue import JobQueue
from app.domain.models.job import Job, JobDelivery
from app.infrastructure.storage.redis import RedisClient
from redis.exceptions import ResponseError

logger = logging.getLogger(__name__)


class RedisStreamJobQueue(JobQueue):
    """基于RedisStream消费者组的任务队列

    - 写入: XADD，Redis记录后即返回
    - 领取: 优先XAUTOCLAIM超时未确认的消息(消费者崩溃后重新投递)，否则XREADGROUP读取新消息
    - 确认: XACK+XDEL，只有确认后消息才会离开队列
    - 失败: 写入 <队列名>:failed 后确认，不再重试
    """

    def __init__(
        self,
        stream_name: str,
        redis_client: RedisClient,
        group_name: str = "files_manager_workers",
        claim_idle_ms: int = 60000,
    ) -> None:
        """构造函数，完成队列名字、消费者组、重新投递等待时长的初始化"""
        self._stream_name = stream_name
        self._redis = redis_client
        self._group_name = group_name
        self._claim_idle_ms = claim_idle_ms

    @property
    def name(self) -> str:
        return self._stream_name

    @property
    def dead_letter_name(self) -> str:
        return f"{self._stream_name}:failed"

    async def ensure_group(self) -> None:
        """创建消费者组(流不存在时一并创建)，组已存在时忽略"""
        try:
            await self._redis.client.xgroup_create(
                self._stream_name, self._group_name, id="0", mkstream=True
            )
            logger.info(f"消息队列[{self._stream_name}]消费者组[{self._group_name}]创建成功")
        except ResponseError as e:
            if "BUSYGROUP" not in str(e):
                raise

    async def enqueue(self, job: Job) -> str:
        """往redis-stream中添加一条任务并返回消息id"""
        message = job.to_message()
        message_id = await self._redis.client.xadd(self._stream_name, {"data": message})
        logger.debug(f"往消息队列[{self._stream_name}]中添加一条任务: {message}")
        return message_id

    async def _claim_stale(self, consumer: str) -> Optional[Tuple[str, Any]]:
        """重新领取一条超时未确认的消息"""
        result = await self._redis.client.xautoclaim(
            self._stream_name,
            self._group_name,
            consumer,
            min_idle_time=self._claim_idle_ms,
            start_id="0-0",
            count=1,
        )
        # 返回结构: [下一个游标, [(id, 字段)], (Redis7+)已删除的id列表]
        messages = result[1] if result and len(result) > 1 else []
        for message_id, fields in messages:
            if message_id is None:
                continue
            if fields is None:
                # 消息体已被删除，只剩待确认记录，直接确认掉
                await self._redis.client.xack(self._stream_name, self._group_name, message_id)
                continue
            return message_id, fields
        return None

    async def _read_new(
        self, consumer: str, block_ms: Optional[int]
    ) -> Optional[Tuple[str, Any]]:
        """读取一条从未投递过的消息"""
        messages = await self._redis.client.xreadgroup(
            self._group_name,
            consumer,
            {self._stream_name: ">"},
            count=1,
            block=block_ms,
        )
        if not messages:
            return None

        stream_messages = messages[0][1]
        if not stream_messages:
            return None
        return stream_messages[0]

    async def _delivery_count(self, message_id: str) -> int:
        """查询消息累计投递次数"""
        pending = await self._redis.client.xpending_range(
            self._stream_name,
            self._group_name,
            min=message_id,
            max=message_id,
            count=1,
        )
        if not pending:
            return 1
        return int(pending[0].get("times_delivered", 1))

    async def reserve(
        self, consumer: str, block_ms: Optional[int] = None
    ) -> Optional[JobDelivery]:
        """领取一条任务，优先重新领取超时未确认的任务"""
        # 1.先尝试领取崩溃/超时的消费者遗留的消息
        entry = await self._claim_stale(consumer)

        # 2.没有遗留消息则阻塞读取新消息
        if entry is None:
            entry = await self._read_new(consumer, block_ms)
        if entry is None:
            return None

        # 3.组装投递信息
        message_id, fields = entry
        return JobDelivery(
            message_id=message_id,
            data=(fields or {}).get("data"),
            delivery_count=await self._delivery_count(message_id),
        )

    async def ack(self, message_id: str) -> None:
        """确认消息并从流中删除"""
        await self._redis.client.xack(self._stream_name, self._group_name, message_id)
        await self._redis.client.xdel(self._stream_name, message_id)

    async def dead_letter(self, delivery: JobDelivery, reason: str) -> None:
        """将消息写入失败队列后确认"""
        await self._redis.client.xadd(
            self.dead_letter_name,
            {
                "data": delivery.data or "",
                "error": reason,
                "source_id": delivery.message_id,
            },
        )
        await self.ack(delivery.message_id)
        logger.warning(
            f"任务[{delivery.message_id}]已转入失败队列[{self.dead_letter_name}]: {reason}"
        )

    async def size(self) -> int:
        """获取redis-stream的长度"""
        return await self._redis.client.xlen(self._stream_name)
