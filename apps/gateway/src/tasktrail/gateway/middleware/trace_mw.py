"""TraceMiddleware -- 任务级日志上下文

从 /api/tasks/{task_id} 路径中提取 task_id 绑定到 structlog contextvars，
使同一任务的操作日志可以串联检索。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# ULID 字符串长度
_TASK_ID_LENGTH = 26


class TraceMiddleware(BaseHTTPMiddleware):
    """任务级追踪中间件 -- 为单任务操作绑定 task_id"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        parts = request.url.path.strip("/").split("/")

        # 仅匹配 api/tasks/{task_id}，排除 /api/tasks/search
        if len(parts) == 3 and parts[:2] == ["api", "tasks"]:
            task_id = parts[2]
            if len(task_id) == _TASK_ID_LENGTH:
                structlog.contextvars.bind_contextvars(task_id=task_id)

        return await call_next(request)
