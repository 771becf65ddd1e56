import logging

from app.application.errors.exceptions import AppException, ServerRequestsError
from app.interfaces.schemas import ErrorResponse
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """统一处理项目中的异常，涵盖：自定义业务异常、请求校验异常、HTTP异常、通用异常"""

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request, exc: AppException
    ) -> JSONResponse:
        """自定义应用异常处理器，捕获AppException并返回 {"error": msg}"""

        logger.error(f"App exception: {exc.msg}")

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=exc.msg).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """请求参数校验异常处理器，统一返回400"""

        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(
            loc for loc in first.get("loc", ()) if isinstance(loc, str) and loc != "body"
        )
        msg = f"Invalid {field}" if field else "Invalid request"
        logger.error(f"Validation exception: {msg}")

        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error=msg).model_dump(),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        """HTTP异常处理器，捕获HTTPException并返回标准化响应"""

        logger.error(f"HTTP exception: {exc.detail}")

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc.detail)).model_dump(),
        )

    @app.exception_handler(Exception)
    async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """通用异常处理器，捕获所有未处理的异常，状态码500"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)

        error = ServerRequestsError()
        return JSONResponse(
            status_code=error.status_code,
            content=ErrorResponse(error=error.msg).model_dump(),
        )
