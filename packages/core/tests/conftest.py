"""packages/core 测试配置 -- 核心层 fixture"""

from pathlib import Path

import pytest
import pytest_asyncio
from tasktrail.core.store.shard_io import JsonShardIO
from tasktrail.core.store.task_store import JsonShardTaskStore


@pytest.fixture
def shard_io(tmp_shards_dir: Path) -> JsonShardIO:
    """已创建分片目录的 JsonShardIO"""
    io = JsonShardIO(tmp_shards_dir)
    io.ensure_root()
    return io


@pytest_asyncio.fixture
async def task_store(tmp_data_dir: Path) -> JsonShardTaskStore:
    """空存储目录上的 TaskStore"""
    return JsonShardTaskStore(tmp_data_dir)
