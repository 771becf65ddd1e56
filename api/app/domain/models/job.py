"""后台任务领域模型"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Job(BaseModel):
    """后台任务基类，序列化时使用驼峰字段名"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_message(self) -> str:
        """序列化为写入消息队列的JSON字符串"""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class GenerateThumbnailsJob(Job):
    """缩略图生成任务，字段缺失时由消费者判定为致命错误"""

    file_id: Optional[str] = Field(default=None, alias="fileId")
    user_id: Optional[str] = Field(default=None, alias="userId")


class SendWelcomeJob(Job):
    """欢迎邮件发送任务"""

    user_id: Optional[str] = Field(default=None, alias="userId")


class JobDelivery(BaseModel):
    """一次任务投递，记录消息id、原始数据以及累计投递次数"""

    message_id: str
    data: Optional[str] = None
    delivery_count: int = 1
