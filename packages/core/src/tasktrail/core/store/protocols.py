"""Store Protocol 接口定义

定义 ShardIO 与 TaskStore 的抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from pathlib import Path
from typing import Protocol

from ..models.shard import ShardInfo
from ..models.task import DeleteOutcome, TaskCreate, TaskFilters, TaskRecord, TaskUpdate


class ShardIO(Protocol):
    """单个分片的整体读写"""

    def ensure_root(self) -> None:
        """创建存储根目录（幂等）"""
        ...

    def shard_path(self, shard_id: str) -> Path:
        """分片的物理位置"""
        ...

    def exists(self, shard_id: str) -> bool:
        """分片是否已创建"""
        ...

    def list_shard_ids(self) -> list[str]:
        """列出已存在的分片"""
        ...

    def read(self, shard_id: str) -> list[TaskRecord]:
        """读取分片全部记录，不存在时返回空列表"""
        ...

    def write(self, shard_id: str, records: list[TaskRecord]) -> None:
        """原子替换分片内容"""
        ...


class TaskStore(Protocol):
    """Task 存储接口"""

    async def create_task(self, data: TaskCreate) -> TaskRecord:
        """创建任务记录"""
        ...

    async def get_task(self, task_id: str) -> TaskRecord | None:
        """根据 id 查询任务"""
        ...

    async def update_task(self, task_id: str, changes: TaskUpdate) -> TaskRecord | None:
        """部分更新任务"""
        ...

    async def delete_task(
        self,
        task_id: str,
        hard_delete: bool = False,
    ) -> TaskRecord | DeleteOutcome | None:
        """删除任务（soft: 标记 cancelled；hard: 移除记录）"""
        ...

    async def list_all(self) -> list[TaskRecord]:
        """查询全部任务"""
        ...

    async def filter_tasks(self, filters: TaskFilters) -> list[TaskRecord]:
        """按条件筛选任务"""
        ...

    async def inspect_shards(self) -> list[ShardInfo]:
        """查询各分片概况"""
        ...
