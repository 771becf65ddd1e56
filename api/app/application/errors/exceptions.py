from typing import Any


class AppException(RuntimeError):
    """基础应用异常类，继承RuntimeError"""

    def __init__(
        self,
        code: int = 400,
        status_code: int = 400,
        msg: str = "Bad request",
        data: Any = None,
    ):
        """构造函数，完成错误数据初始化"""
        self.code = code
        self.status_code = status_code
        self.msg = msg
        self.data = data
        super().__init__(msg)


class BadRequestError(AppException):
    """客户端请求错误异常(缺失/非法字段)"""

    def __init__(self, msg: str = "Bad request"):
        super().__init__(code=400, status_code=400, msg=msg)


class MissingFieldError(BadRequestError):
    """必填字段缺失异常"""

    def __init__(self, field: str):
        self.field = field
        super().__init__(msg=f"Missing {field}")


class ParentNotFoundError(BadRequestError):
    """父级文件夹不存在异常"""

    def __init__(self, msg: str = "Parent not found"):
        super().__init__(msg=msg)


class ParentNotAFolderError(BadRequestError):
    """父级不是文件夹异常"""

    def __init__(self, msg: str = "Parent is not a folder"):
        super().__init__(msg=msg)


class ConflictError(BadRequestError):
    """资源重复异常(如重复注册)"""

    def __init__(self, msg: str = "Already exist"):
        super().__init__(msg=msg)


class FolderContentError(BadRequestError):
    """文件夹没有内容异常"""

    def __init__(self, msg: str = "A folder doesn't have content"):
        super().__init__(msg=msg)


class UnauthorizedError(AppException):
    """未认证或会话失效异常"""

    def __init__(self, msg: str = "Unauthorized"):
        super().__init__(code=401, status_code=401, msg=msg)


class NotFoundError(AppException):
    """资源未找到异常，非所属用户访问私有资源同样按未找到处理"""

    def __init__(self, msg: str = "Not found"):
        super().__init__(code=404, status_code=404, msg=msg)


class ContentNotFoundError(NotFoundError):
    """文件内容(原图或缩略图)在存储中不存在"""

    def __init__(self, content_ref: str = "", msg: str = "Not found"):
        self.content_ref = content_ref
        super().__init__(msg=msg)


class ServerRequestsError(AppException):
    """服务器请求错误异常"""

    def __init__(self, msg: str = "Internal Server Error"):
        super().__init__(code=500, status_code=500, msg=msg)


class JobError(RuntimeError):
    """后台任务异常基类，retryable标识任务是否可以重试"""

    retryable: bool = True

    def __init__(self, msg: str):
        self.msg = msg
        super().__init__(msg)


class FatalJobError(JobError):
    """致命任务异常，重试也无法成功，直接转入失败队列"""

    retryable = False


class RetryableJobError(JobError):
    """可重试任务异常，保留在队列中等待重新投递"""

    retryable = True
