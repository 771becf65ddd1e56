"""用户相关 Schema"""

from typing import Optional

from app.domain.models.user import User
from pydantic import BaseModel, Field


class CreateUserRequest(BaseModel):
    """用户注册请求，字段缺失由服务层返回对应的错误信息"""

    email: Optional[str] = Field(None, description="邮箱")
    password: Optional[str] = Field(None, description="密码")

    class Config:
        json_schema_extra = {
            "example": {"email": "bob@dylan.com", "password": "toto1234!"}
        }


class UserResponse(BaseModel):
    """用户信息响应"""

    id: str = Field(..., description="用户 ID")
    email: str = Field(..., description="邮箱")

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(id=user.id, email=user.email)
