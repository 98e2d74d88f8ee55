"""
统一异常处理

- ZiweiError 子类按 code 映射为 HTTP 状态码
- 其他未处理异常由中间件兜底为 500，生产环境不暴露细节
"""

import logging
import traceback
from typing import Any, Callable

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from core.calculators.ziwei_errors import ZiweiError
from server.config.env_config import is_production

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": message,
            "error_type": error_type,
        },
    )


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """异常处理中间件"""

    async def dispatch(self, request: Request, call_next: Callable) -> Any:
        try:
            return await call_next(request)
        except HTTPException:
            raise
        except ZiweiError as e:
            return ziwei_error_to_response(e)
        except Exception as e:
            logger.error(f"未处理的异常: {e}\n{traceback.format_exc()}")
            detail = "服务器内部错误，请稍后重试" if is_production() else f"错误: {e}"
            return error_response(500, detail, "internal_error")


def ziwei_error_to_response(exc: ZiweiError) -> JSONResponse:
    if exc.code >= 500:
        logger.error(f"排盘异常 [{exc.error_type}]: {exc.message}", exc_info=exc)
    else:
        logger.warning(f"参数异常 [{exc.error_type}]: {exc.message}")
    message = exc.message
    if exc.code >= 500 and is_production():
        message = "排盘服务异常，请稍后重试"
    return error_response(exc.code, message, exc.error_type)


def register_exception_handlers(app: FastAPI) -> None:
    """注册异常处理器与兜底中间件"""

    @app.exception_handler(ZiweiError)
    async def _handle_ziwei_error(request: Request, exc: ZiweiError):
        return ziwei_error_to_response(exc)

    app.add_middleware(ExceptionHandlerMiddleware)
