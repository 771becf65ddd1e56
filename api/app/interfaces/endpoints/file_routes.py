import logging
from typing import List, Optional

from app.application.services.file_service import FileService
from app.domain.models.file import parse_parent_id, parse_thumbnail_width
from app.interfaces.dependencies import CurrentUser, OptionalUser
from app.interfaces.schemas import CreateFileRequest, FileResponse
from app.interfaces.service_dependencies import get_file_service
from fastapi import APIRouter, Depends, status
from starlette.responses import Response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/files", tags=["文件模块"])


def _parse_page(page: Optional[str]) -> int:
    """页码从0开始，非法或负数一律视为第0页"""
    try:
        return max(int(page), 0)
    except (TypeError, ValueError):
        return 0


@router.post(
    path="",
    response_model=FileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="文件上传接口",
    description="创建文件夹，或上传Base64编码的文件/图片，图片会在后台生成缩略图",
)
async def upload_file(
    request: CreateFileRequest,
    current_user: CurrentUser,
    file_service: FileService = Depends(get_file_service),
) -> FileResponse:
    """文件上传接口，返回文件信息"""
    file = await file_service.upload(
        user_id=current_user.id,
        name=request.name,
        type=request.type,
        data=request.data,
        parent_id=parse_parent_id(request.parent_id),
        is_public=bool(request.is_public),
    )
    return FileResponse.from_domain(file)


@router.get(
    path="",
    response_model=List[FileResponse],
    summary="获取文件列表接口",
    description="分页获取当前用户在指定父级下的文件，每页20条",
)
async def list_files(
    current_user: CurrentUser,
    parentId: Optional[str] = None,
    page: Optional[str] = None,
    file_service: FileService = Depends(get_file_service),
) -> List[FileResponse]:
    """获取文件列表，父级不做存在性校验"""
    files = await file_service.list_children(
        user_id=current_user.id,
        parent_id=parse_parent_id(parentId),
        page=_parse_page(page),
    )
    return [FileResponse.from_domain(file) for file in files]


@router.get(
    path="/{file_id}",
    response_model=FileResponse,
    summary="获取文件信息接口",
    description="获取文件的基础信息，公开文件或自己的文件可读",
)
async def get_file_info(
    file_id: str,
    current_user: CurrentUser,
    file_service: FileService = Depends(get_file_service),
) -> FileResponse:
    """获取文件的基础信息"""
    file = await file_service.get_file_info(file_id=file_id, user_id=current_user.id)
    return FileResponse.from_domain(file)


@router.put(
    path="/{file_id}/publish",
    response_model=FileResponse,
    summary="公开文件接口",
)
async def publish_file(
    file_id: str,
    current_user: CurrentUser,
    file_service: FileService = Depends(get_file_service),
) -> FileResponse:
    file = await file_service.set_visibility(file_id, current_user.id, True)
    return FileResponse.from_domain(file)


@router.put(
    path="/{file_id}/unpublish",
    response_model=FileResponse,
    summary="取消公开文件接口",
)
async def unpublish_file(
    file_id: str,
    current_user: CurrentUser,
    file_service: FileService = Depends(get_file_service),
) -> FileResponse:
    file = await file_service.set_visibility(file_id, current_user.id, False)
    return FileResponse.from_domain(file)


@router.get(
    path="/{file_id}/data",
    summary="获取文件内容接口",
    description="获取文件原始内容，size为500/250/100时返回对应宽度的缩略图",
)
async def get_file_data(
    file_id: str,
    current_user: OptionalUser,
    size: Optional[str] = None,
    file_service: FileService = Depends(get_file_service),
) -> Response:
    """获取文件内容，未登录用户只能读取公开文件"""
    data, mime_type = await file_service.get_content(
        file_id=file_id,
        user_id=current_user.id if current_user else None,
        width=parse_thumbnail_width(size),
    )
    return Response(content=data, media_type=mime_type)
