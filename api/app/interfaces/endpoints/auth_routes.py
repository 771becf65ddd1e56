"""认证路由模块"""

import logging
from typing import Optional

from app.application.errors.exceptions import UnauthorizedError
from app.application.services.auth_service import AuthService
from app.interfaces.dependencies import token_header
from app.interfaces.schemas import TokenResponse
from app.interfaces.service_dependencies import get_auth_service
from core.security import parse_basic_authorization
from fastapi import APIRouter, Depends, Header, Response, status

logger = logging.getLogger(__name__)
router = APIRouter(tags=["认证模块"])


@router.get(
    "/connect",
    response_model=TokenResponse,
    summary="用户登录",
    description="通过Basic认证(email:password)登录，返回会话令牌",
)
async def connect(
    authorization: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """用户登录"""
    credentials = parse_basic_authorization(authorization)
    if not credentials:
        raise UnauthorizedError()

    email, password = credentials
    token = await auth_service.login(email, password)
    return TokenResponse(token=token)


@router.get(
    "/disconnect",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="用户登出",
    description="删除X-Token对应的会话",
)
async def disconnect(
    token: Optional[str] = Depends(token_header),
    auth_service: AuthService = Depends(get_auth_service),
) -> Response:
    """用户登出"""
    await auth_service.logout(token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
