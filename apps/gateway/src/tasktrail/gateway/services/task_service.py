"""TaskService -- 任务查询/创建/更新/删除业务逻辑

对 TaskStore 的薄封装：store 以 None 表示不存在，
这里统一转换为 TaskNotFoundError，由 HTTP 层映射为 404。
"""

import structlog
from tasktrail.core.exceptions import TaskNotFoundError
from tasktrail.core.models import (
    DeleteOutcome,
    TaskCreate,
    TaskFilters,
    TaskRecord,
    TaskUpdate,
)
from tasktrail.core.store import TaskStore

log = structlog.get_logger()


class TaskService:
    """任务业务服务"""

    def __init__(self, task_store: TaskStore) -> None:
        self._store = task_store

    async def list_tasks(self) -> list[TaskRecord]:
        """查询全部任务"""
        return await self._store.list_all()

    async def filter_tasks(self, filters: TaskFilters) -> list[TaskRecord]:
        """按条件筛选任务"""
        tasks = await self._store.filter_tasks(filters)
        log.debug(
            "tasks_filtered",
            filters=filters.model_dump(exclude_none=True),
            count=len(tasks),
        )
        return tasks

    async def get_task(self, task_id: str) -> TaskRecord:
        """查询单个任务

        Raises:
            TaskNotFoundError: 任务不存在
        """
        task = await self._store.get_task(task_id)
        if task is None:
            raise self._not_found(task_id)
        return task

    async def create_task(self, data: TaskCreate) -> TaskRecord:
        """创建任务"""
        return await self._store.create_task(data)

    async def update_task(self, task_id: str, changes: TaskUpdate) -> TaskRecord:
        """部分更新任务

        Raises:
            TaskNotFoundError: 任务不存在
        """
        task = await self._store.update_task(task_id, changes)
        if task is None:
            raise self._not_found(task_id)
        return task

    async def delete_task(
        self,
        task_id: str,
        hard_delete: bool = False,
    ) -> TaskRecord | DeleteOutcome:
        """删除任务（默认 soft delete）

        Raises:
            TaskNotFoundError: 任务不存在
        """
        result = await self._store.delete_task(task_id, hard_delete)
        if result is None:
            raise self._not_found(task_id)
        return result

    @staticmethod
    def _not_found(task_id: str) -> TaskNotFoundError:
        log.info("task_not_found", task_id=task_id)
        return TaskNotFoundError(task_id)
