"""损坏分片与存储故障测试

测试内容：
1. 读路径：损坏分片按空处理，其它分片不受影响
2. 写路径：损坏分片拒绝写入，修复后恢复
3. 存储故障按操作上抛 StorageUnavailableError
"""

import os

import pytest
from tasktrail.core.exceptions import CorruptShardError, StorageUnavailableError
from tasktrail.core.models import TaskCreate, TaskFilters, TaskUpdate
from tasktrail.core.store.task_store import JsonShardTaskStore


def _corrupt(store: JsonShardTaskStore, shard_id: str) -> None:
    (store.shards_dir / f"{shard_id}.json").write_text("[{broken", encoding="utf-8")


class TestCorruptShardReads:
    async def test_list_all_skips_corrupt_shard(self, task_store: JsonShardTaskStore):
        good = await task_store.create_task(TaskCreate(content="good", project="good"))
        _corrupt(task_store, "bad")

        assert await task_store.list_all() == [good]
        assert task_store.corrupt_shards == ["bad"]

    async def test_get_and_filter_still_work(self, task_store: JsonShardTaskStore):
        good = await task_store.create_task(TaskCreate(content="fix bug", project="good"))
        _corrupt(task_store, "aaa")

        assert await task_store.get_task(good.id) == good
        assert await task_store.filter_tasks(TaskFilters(keyword="bug")) == [good]

    async def test_update_in_other_shard_unaffected(self, task_store: JsonShardTaskStore):
        good = await task_store.create_task(TaskCreate(content="x", project="good"))
        _corrupt(task_store, "aaa")

        updated = await task_store.update_task(good.id, TaskUpdate(status="completed"))
        assert updated.status == "completed"

    async def test_corruption_logged_once(self, task_store: JsonShardTaskStore, monkeypatch):
        import tasktrail.core.store.task_store as task_store_module

        events = []
        monkeypatch.setattr(
            task_store_module.log,
            "warning",
            lambda event, **kw: events.append((event, kw)),
        )
        _corrupt(task_store, "bad")

        await task_store.list_all()
        await task_store.list_all()

        assert [e for e, _ in events] == ["shard_corrupt"]
        assert events[0][1]["shard_id"] == "bad"


class TestCorruptShardWrites:
    async def test_create_into_corrupt_shard_refused(self, task_store: JsonShardTaskStore):
        _corrupt(task_store, "bad")
        with pytest.raises(CorruptShardError) as exc_info:
            await task_store.create_task(TaskCreate(content="x", project="bad"))
        assert exc_info.value.shard_id == "bad"

        # 原文件保持不变，等待人工修复
        raw = (task_store.shards_dir / "bad.json").read_text(encoding="utf-8")
        assert raw == "[{broken"

    async def test_create_into_other_shard_allowed(self, task_store: JsonShardTaskStore):
        _corrupt(task_store, "bad")
        task = await task_store.create_task(TaskCreate(content="x", project="ok"))
        assert await task_store.get_task(task.id) == task

    async def test_repair_restores_writes(self, task_store: JsonShardTaskStore):
        _corrupt(task_store, "bad")
        await task_store.list_all()
        assert task_store.corrupt_shards == ["bad"]

        (task_store.shards_dir / "bad.json").write_text("[]", encoding="utf-8")
        task = await task_store.create_task(TaskCreate(content="x", project="bad"))

        assert task_store.corrupt_shards == []
        assert await task_store.list_all() == [task]

    async def test_inspect_reports_corrupt(self, task_store: JsonShardTaskStore):
        _corrupt(task_store, "bad")
        infos = {i.shard_id: i for i in await task_store.inspect_shards()}
        assert infos["bad"].corrupt is True
        assert infos["bad"].records == 0
        assert infos["default"].corrupt is False


class TestStorageUnavailable:
    async def test_write_failure_surfaces(self, task_store: JsonShardTaskStore, monkeypatch):
        existing = await task_store.create_task(TaskCreate(content="existing"))

        def broken_replace(src, dst):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(os, "replace", broken_replace)
        with pytest.raises(StorageUnavailableError):
            await task_store.create_task(TaskCreate(content="new"))
        monkeypatch.undo()

        assert await task_store.list_all() == [existing]

    async def test_read_failure_surfaces(self, task_store: JsonShardTaskStore, monkeypatch):
        await task_store.create_task(TaskCreate(content="x"))

        def broken_read(shard_id):
            raise StorageUnavailableError(task_store.shards_dir, PermissionError("denied"))

        monkeypatch.setattr(task_store._io, "read", broken_read)
        with pytest.raises(StorageUnavailableError):
            await task_store.list_all()
