from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """错误响应结构，所有业务异常统一返回 {"error": msg}"""

    error: str = Field(..., description="错误信息")
