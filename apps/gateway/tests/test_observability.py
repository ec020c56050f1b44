"""可观测性测试

测试内容：
1. HTTP 请求含 X-Request-ID 响应头，合法的上游 request_id 被沿用
2. 单任务路由绑定 task_id 日志上下文
3. 日志处理器：组件标注、分片故障标记、store 日志级别
"""

import logging

import pytest
import structlog
from httpx import AsyncClient
from starlette.requests import Request
from starlette.responses import Response
from tasktrail.gateway.middleware.logging_config import (
    STORE_LOGGER_NAME,
    add_component,
    flag_storage_fault,
    setup_logging,
)
from tasktrail.gateway.middleware.logging_mw import resolve_request_id
from tasktrail.gateway.middleware.trace_mw import TraceMiddleware
from ulid import ULID


class TestRequestId:
    async def test_request_id_in_response_header(self, client: AsyncClient):
        resp = await client.post("/api/tasks", json={"content": "obs"})
        assert resp.status_code == 201
        # ULID 格式：26 字符
        assert len(resp.headers["x-request-id"]) == 26

    async def test_request_ids_are_unique(self, client: AsyncClient):
        ids = set()
        for _ in range(3):
            resp = await client.get("/api/tasks")
            ids.add(resp.headers["x-request-id"])
        assert len(ids) == 3

    async def test_upstream_request_id_reused(self, client: AsyncClient):
        upstream = str(ULID())
        resp = await client.get("/api/tasks", headers={"X-Request-ID": upstream})
        assert resp.headers["x-request-id"] == upstream

    def test_invalid_upstream_request_id_replaced(self):
        assert resolve_request_id("not-a-ulid") != "not-a-ulid"
        assert len(resolve_request_id("not-a-ulid")) == 26
        assert len(resolve_request_id(None)) == 26


def _request(path: str) -> Request:
    return Request({"type": "http", "method": "GET", "path": path, "headers": []})


class TestTraceMiddleware:
    async def _dispatch(self, path: str) -> dict:
        structlog.contextvars.clear_contextvars()
        middleware = TraceMiddleware(app=None)
        captured = {}

        async def call_next(request: Request) -> Response:
            captured.update(structlog.contextvars.get_contextvars())
            return Response()

        await middleware.dispatch(_request(path), call_next)
        structlog.contextvars.clear_contextvars()
        return captured

    async def test_binds_task_id(self):
        task_id = "01JTESTTRACE00000000000001"
        assert (await self._dispatch(f"/api/tasks/{task_id}"))["task_id"] == task_id

    async def test_ignores_search_and_list(self):
        assert "task_id" not in await self._dispatch("/api/tasks/search")
        assert "task_id" not in await self._dispatch("/api/tasks")


class TestLogProcessors:
    def test_component_from_logger_name(self):
        store_event = add_component(None, "info", {"logger": "tasktrail.core.store.task_store"})
        gateway_event = add_component(None, "info", {"logger": "tasktrail.gateway.errors"})
        other_event = add_component(None, "info", {"logger": "uvicorn.error"})

        assert store_event["component"] == "store"
        assert gateway_event["component"] == "gateway"
        assert "component" not in other_event

    def test_storage_fault_flag(self):
        assert flag_storage_fault(None, "warning", {"event": "shard_corrupt"})["storage_fault"]
        assert "storage_fault" not in flag_storage_fault(None, "info", {"event": "task_created"})


@pytest.fixture
def store_logger():
    logger = logging.getLogger(STORE_LOGGER_NAME)
    level = logger.level
    yield logger
    logger.setLevel(level)


class TestSetupLogging:
    def test_store_level_overrides_root(self, store_logger, monkeypatch):
        monkeypatch.setenv("TASKTRAIL_STORE_LOG_LEVEL", "ERROR")

        setup_logging(log_level="INFO")
        assert logging.getLogger().level == logging.INFO
        assert not store_logger.isEnabledFor(logging.WARNING)
        assert logging.getLogger("tasktrail.gateway").isEnabledFor(logging.INFO)

    def test_store_level_follows_root_by_default(self, store_logger, monkeypatch):
        monkeypatch.delenv("TASKTRAIL_STORE_LOG_LEVEL", raising=False)

        setup_logging(log_level="WARNING")
        assert store_logger.getEffectiveLevel() == logging.WARNING
        setup_logging(log_level="INFO")
