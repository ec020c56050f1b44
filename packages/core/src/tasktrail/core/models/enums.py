"""枚举定义 -- TaskStatus / TaskPriority

Store 不校验状态流转：任何合法枚举值在 create/update 时都会被接受，
soft delete 统一落到 CANCELLED。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """任务状态"""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    # soft delete 的目标状态
    CANCELLED = "cancelled"


class TaskPriority(StrEnum):
    """任务优先级"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
