"""依赖注入模块 -- 通过 FastAPI Depends 注入 TaskStore 实例

TaskStore 实例通过 app.state 管理，在 lifespan 中初始化。
"""

from fastapi import Request
from tasktrail.core.store import TaskStore


def get_task_store(request: Request) -> TaskStore:
    """从 app.state 获取 TaskStore 实例"""
    return request.app.state.task_store
