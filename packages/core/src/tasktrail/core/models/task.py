"""Task 数据模型

TaskRecord 是持久化单元；分片文件与 HTTP 响应使用 camelCase 字段名
（createdAt / updatedAt），Python 侧使用 snake_case 属性。
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import TaskPriority, TaskStatus


class TaskRecord(BaseModel):
    """Task 持久化记录"""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="唯一标识，ULID 格式，创建后不可变")
    content: str = Field(description="任务描述")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="当前状态")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="优先级")
    project: str | None = Field(default=None, description="所属项目，决定分片")
    conversation: str | None = Field(default=None, description="关联会话标签")
    created_at: datetime = Field(alias="createdAt", description="创建时间（UTC）")
    updated_at: datetime = Field(alias="updatedAt", description="最近一次变更时间（UTC）")

    def to_storage(self) -> dict[str, Any]:
        """序列化为分片文件 / API 响应格式，缺省的可选字段不输出"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TaskCreate(BaseModel):
    """创建任务的输入

    content 的非空校验由 TaskStore 负责（InvalidInputError）。
    """

    content: str = Field(description="任务描述，不能为空")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="初始状态")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="优先级")
    project: str | None = Field(default=None, description="所属项目")
    conversation: str | None = Field(default=None, description="关联会话")


class TaskUpdate(BaseModel):
    """部分更新输入

    只有调用方显式提供且非 null 的字段参与合并；空字符串会覆盖原值。
    id / createdAt 不在此模型中，因此不可修改。
    """

    content: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    project: str | None = None
    conversation: str | None = None

    def changes(self) -> dict[str, Any]:
        """返回需要合并的字段"""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class TaskFilters(BaseModel):
    """筛选条件 -- 全部可选，AND 组合"""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    project: str | None = None
    conversation: str | None = None
    keyword: str | None = Field(default=None, description="content 大小写不敏感子串")

    def matches(self, task: TaskRecord) -> bool:
        """判断任务是否满足全部条件（空条件不构成约束）"""
        if self.status and task.status != self.status:
            return False
        if self.priority and task.priority != self.priority:
            return False
        if self.project and task.project != self.project:
            return False
        if self.conversation and task.conversation != self.conversation:
            return False
        if self.keyword and self.keyword.lower() not in task.content.lower():
            return False
        return True


class DeleteOutcome(BaseModel):
    """hard delete 结果"""

    id: str
    deleted: bool = True
