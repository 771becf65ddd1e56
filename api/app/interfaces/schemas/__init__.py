from .auth import TokenResponse
from .base import ErrorResponse
from .file import CreateFileRequest, FileResponse
from .user import CreateUserRequest, UserResponse

__all__ = [
    "ErrorResponse",
    "TokenResponse",
    "CreateUserRequest",
    "UserResponse",
    "CreateFileRequest",
    "FileResponse",
]
