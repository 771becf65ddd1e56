import logging
from typing import Dict

from app.application.services.status_service import StatusService
from app.interfaces.service_dependencies import get_status_service
from fastapi import APIRouter, Depends

logger = logging.getLogger(__name__)
router = APIRouter(tags=["状态模块"])


@router.get(
    "/status",
    response_model=Dict[str, bool],
    summary="系统健康检查",
    description="检查redis和数据库是否可用",
)
async def get_status(
    status_service: StatusService = Depends(get_status_service),
) -> Dict[str, bool]:
    """系统健康检查，返回 {"redis": bool, "db": bool}"""
    return await status_service.is_alive()


@router.get(
    "/stats",
    response_model=Dict[str, int],
    summary="使用统计",
    description="统计用户数量和文件数量",
)
async def get_stats(
    status_service: StatusService = Depends(get_status_service),
) -> Dict[str, int]:
    """使用统计，返回 {"users": n, "files": n}"""
    return await status_service.stats()
