"""apps/gateway 测试配置 -- FastAPI app + httpx AsyncClient fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tasktrail.core.store import create_task_store


@pytest_asyncio.fixture
async def app(tmp_data_dir: Path, monkeypatch):
    """创建测试用 FastAPI app 实例"""
    monkeypatch.setenv("TASKTRAIL_DATA_DIR", str(tmp_data_dir))
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")

    from tasktrail.gateway.main import create_app

    application = create_app()

    # 手动初始化（ASGITransport 不触发 lifespan）
    application.state.task_store = create_task_store(tmp_data_dir)
    yield application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

