"""用户路由模块"""

import logging

from app.application.services.auth_service import AuthService
from app.interfaces.dependencies import CurrentUser
from app.interfaces.schemas import CreateUserRequest, UserResponse
from app.interfaces.service_dependencies import get_auth_service
from fastapi import APIRouter, Depends, status

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["用户模块"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="用户注册",
    description="通过邮箱和密码注册新账户，注册成功后发送欢迎邮件",
)
async def create_user(
    request: CreateUserRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """用户注册"""
    user = await auth_service.register(request.email, request.password)
    return UserResponse.from_domain(user)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="获取当前用户信息",
)
async def get_me(current_user: CurrentUser) -> UserResponse:
    """获取当前登录用户信息"""
    return UserResponse.from_domain(current_user)
