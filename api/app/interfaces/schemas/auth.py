"""认证相关 Schema"""

from pydantic import BaseModel, Field


class TokenResponse(BaseModel):
    """会话令牌响应"""

    token: str = Field(..., description="会话令牌，请求时通过X-Token头携带")
