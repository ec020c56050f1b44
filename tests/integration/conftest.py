"""集成测试共享 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tasktrail.core.store import create_task_store


@pytest_asyncio.fixture
async def integration_app(tmp_data_dir: Path, monkeypatch):
    """集成测试用 FastAPI app"""
    monkeypatch.setenv("TASKTRAIL_DATA_DIR", str(tmp_data_dir))
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")

    from tasktrail.gateway.main import create_app

    app = create_app()
    app.state.task_store = create_task_store(tmp_data_dir)
    yield app


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
