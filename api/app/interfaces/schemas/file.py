"""文件相关 Schema，对外字段使用驼峰命名"""

from typing import Optional, Union

from app.domain.models.file import ROOT_PARENT_ID, File
from pydantic import BaseModel, ConfigDict, Field


class CreateFileRequest(BaseModel):
    """文件上传请求，data为Base64编码的文件内容"""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "image.png",
                "type": "image",
                "parentId": 0,
                "isPublic": False,
                "data": "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg==",
            }
        },
    )

    name: Optional[str] = Field(None, description="文件名")
    type: Optional[str] = Field(None, description="文件类型: folder, file, image")
    parent_id: Optional[Union[int, str]] = Field(
        None, alias="parentId", description="父文件夹id，0或缺省表示根目录"
    )
    is_public: Optional[bool] = Field(False, alias="isPublic", description="是否公开，null视为false")
    data: Optional[str] = Field(None, description="Base64编码的文件内容")


class FileResponse(BaseModel):
    """文件信息响应"""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(..., alias="userId")
    name: str
    type: str
    is_public: bool = Field(..., alias="isPublic")
    parent_id: Union[str, int] = Field(..., alias="parentId")

    @classmethod
    def from_domain(cls, file: File) -> "FileResponse":
        return cls(
            id=file.id,
            user_id=file.user_id,
            name=file.name,
            type=file.type.value,
            is_public=file.is_public,
            parent_id=file.parent_id if file.parent_id is not None else ROOT_PARENT_ID,
        )
