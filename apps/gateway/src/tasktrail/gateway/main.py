"""FastAPI 应用主文件

app 创建 + lifespan 管理：TaskStore 初始化 + 异常映射 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from tasktrail.core.config import get_data_dir
from tasktrail.core.store import create_task_store

from .errors import register_error_handlers
from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import health, tasks

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时按配置创建 TaskStore"""
    data_dir = get_data_dir()
    task_store = create_task_store(data_dir)
    app.state.task_store = task_store

    shards = await task_store.inspect_shards()
    log.info(
        "task_store_ready",
        data_dir=str(data_dir),
        shards=len(shards),
        corrupt=[s.shard_id for s in shards if s.corrupt],
    )

    yield

    log.info("task_store_closed", data_dir=str(data_dir))


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="TaskTrail Gateway",
        version="0.1.0",
        description="TaskTrail 任务存储 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging()
    setup_logfire()

    register_error_handlers(app)

    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
