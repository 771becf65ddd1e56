from pydantic import BaseModel


class HealthStatus(BaseModel):
    """服务健康状态"""

    service: str = ""  # 服务名称
    status: str = ""  # ok / error
    details: str = ""  # 错误详情
