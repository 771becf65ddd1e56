"""认证依赖模块，会话令牌通过X-Token请求头携带"""

from typing import Annotated, Optional

from app.application.errors.exceptions import UnauthorizedError
from app.application.services.auth_service import AuthService
from app.domain.models.user import User
from app.interfaces.service_dependencies import get_auth_service
from fastapi import Depends
from fastapi.security import APIKeyHeader

# X-Token 认证方案
token_header = APIKeyHeader(name="X-Token", auto_error=False)


async def get_current_user(
    token: Annotated[Optional[str], Depends(token_header)],
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """获取当前登录用户

    从 X-Token 头中提取会话令牌并解析

    Raises:
        UnauthorizedError: 401 未认证
    """
    return await auth_service.get_current_user(token)


async def get_current_user_optional(
    token: Annotated[Optional[str], Depends(token_header)],
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[User]:
    """获取当前登录用户（可选）

    如果未提供令牌或令牌无效，返回 None
    """
    if not token:
        return None

    try:
        return await auth_service.get_current_user(token)
    except UnauthorizedError:
        return None


# 类型别名，方便使用
CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[Optional[User], Depends(get_current_user_optional)]
