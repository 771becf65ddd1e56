from pydantic import BaseModel


class Notification(BaseModel):
    """发往通知出口的消息"""

    recipient: str  # 收件人邮箱
    subject: str  # 主题
    html_body: str  # HTML正文
