"""LoggingMiddleware -- 请求级日志

调用方通过 X-Request-ID 传入合法 ULID 时沿用，否则生成新的 ULID。
request_id / method / path 绑定到 structlog contextvars，store 在本请求内
产生的 task_created、shard_corrupt 等事件都会带上同一个 request_id。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

REQUEST_ID_HEADER = "X-Request-ID"

log = structlog.get_logger()


def resolve_request_id(header_value: str | None) -> str:
    """沿用合法的上游 request_id，否则生成新值"""
    if header_value:
        try:
            return str(ULID.from_str(header_value))
        except ValueError:
            pass
    return str(ULID())


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log.exception(
                "request_failed",
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise

        log.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
