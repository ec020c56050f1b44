"""TaskTrail Core Store -- JSON 分片持久化实现

提供工厂函数按存储根目录创建 TaskStore 实例。
"""

from pathlib import Path

from .protocols import ShardIO, TaskStore
from .shard_io import JsonShardIO
from .shard_resolver import ShardResolver, shard_for
from .task_store import JsonShardTaskStore


def create_task_store(data_dir: str | Path) -> JsonShardTaskStore:
    """创建 TaskStore

    Args:
        data_dir: 存储根目录（不存在时自动创建）

    Returns:
        JsonShardTaskStore 实例
    """
    return JsonShardTaskStore(Path(data_dir))


__all__ = [
    "create_task_store",
    "JsonShardTaskStore",
    "JsonShardIO",
    "ShardResolver",
    "shard_for",
    "ShardIO",
    "TaskStore",
]
