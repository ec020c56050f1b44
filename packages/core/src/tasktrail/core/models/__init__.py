"""TaskTrail Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import TaskPriority, TaskStatus
from .shard import ShardInfo
from .task import DeleteOutcome, TaskCreate, TaskFilters, TaskRecord, TaskUpdate

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskPriority",
    # Task
    "TaskRecord",
    "TaskCreate",
    "TaskUpdate",
    "TaskFilters",
    "DeleteOutcome",
    # Shard
    "ShardInfo",
]
