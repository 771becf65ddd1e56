from typing import Optional

from app.domain.models.file import File


def can_read(requester_id: Optional[str], file: File) -> bool:
    """判断请求者是否可以读取文件：公开文件任何人可读，否则仅所属用户可读"""
    if file.is_public:
        return True
    return requester_id is not None and requester_id == file.user_id

