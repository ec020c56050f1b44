"""TaskStoreError -> HTTP 错误响应映射

统一错误信封：{"error": {"code": ..., "message": ...}}。
存储类故障只返回概要信息，底层原因写入日志。
"""

import structlog
from fastapi import FastAPI, Request
from starlette.responses import JSONResponse
from tasktrail.core.exceptions import (
    CorruptShardError,
    InvalidInputError,
    StorageUnavailableError,
    TaskNotFoundError,
    TaskStoreError,
)

log = structlog.get_logger()


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """构建错误信封响应"""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


async def task_store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """按异常类型映射 HTTP 状态码"""
    if isinstance(exc, InvalidInputError):
        return error_response(400, "INVALID_INPUT", str(exc))

    if isinstance(exc, TaskNotFoundError):
        return error_response(404, "TASK_NOT_FOUND", str(exc))

    if isinstance(exc, CorruptShardError):
        log.error("request_failed_corrupt_shard", shard_id=exc.shard_id, error=str(exc))
        return error_response(
            409,
            "SHARD_CORRUPT",
            f"Shard {exc.shard_id} cannot be decoded and is read-only until repaired",
        )

    if isinstance(exc, StorageUnavailableError):
        log.error("request_failed_storage", path=str(exc.path), error=str(exc.original_error))
        return error_response(503, "STORAGE_UNAVAILABLE", "Task storage is unavailable")

    log.error("request_failed", error=str(exc))
    return error_response(500, "TASK_STORE_ERROR", "Task store operation failed")


def register_error_handlers(app: FastAPI) -> None:
    """注册 TaskStoreError 异常处理器"""
    app.add_exception_handler(TaskStoreError, task_store_error_handler)
