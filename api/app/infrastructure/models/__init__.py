from .base import Base
from .file import FileModel
from .user import UserModel

__all__ = ["Base", "FileModel", "UserModel"]
