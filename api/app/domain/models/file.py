from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from .identifier import generate_object_id

# 根目录哨兵值，对外序列化为数字0
ROOT_PARENT_ID = 0

# 缩略图宽度，按从大到小的顺序生成
THUMBNAIL_WIDTHS = (500, 250, 100)


class FileType(str, Enum):
    """文件类型枚举"""

    FOLDER = "folder"  # 文件夹
    FILE = "file"  # 普通文件
    IMAGE = "image"  # 图片


class File(BaseModel):
    """文件元数据Domain模型，涵盖文件夹、普通文件、图片"""

    id: str = Field(default_factory=generate_object_id)  # 文件id
    user_id: str  # 文件所属用户ID
    name: str  # 文件名字
    type: FileType  # 文件类型
    is_public: bool = False  # 是否公开
    parent_id: Optional[str] = None  # 父文件夹id，None表示根目录
    content_ref: Optional[str] = None  # 内容存储中的引用，文件夹为空
    updated_at: datetime = Field(default_factory=datetime.now)  # 更新时间
    created_at: datetime = Field(default_factory=datetime.now)  # 创建时间

    def is_folder(self) -> bool:
        """检查是否为文件夹"""
        return self.type == FileType.FOLDER

    def is_image(self) -> bool:
        """检查是否为图片"""
        return self.type == FileType.IMAGE


def parse_parent_id(value: Any) -> Optional[str]:
    """在边界处将松散的parentId(0/"0"/空/id字符串)解析为None或文件夹id"""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        # bool是int的子类，true/false都不是合法的父级引用
        return str(value).lower()
    if isinstance(value, int) and value == ROOT_PARENT_ID:
        return None
    text = str(value).strip()
    if text in ("", str(ROOT_PARENT_ID)):
        return None
    return text


def parse_thumbnail_width(value: Any) -> Optional[int]:
    """解析缩略图尺寸，不在支持范围内的值一律视为获取原图"""
    try:
        width = int(value)
    except (TypeError, ValueError):
        return None
    return width if width in THUMBNAIL_WIDTHS else None
