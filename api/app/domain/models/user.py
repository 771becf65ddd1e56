"""用户领域模型"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .identifier import generate_object_id


class User(BaseModel):
    """用户领域模型"""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=generate_object_id)
    email: str
    password_hash: str
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
