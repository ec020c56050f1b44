"""任务路由 -- 六个任务操作

GET    /api/tasks              全部任务（getAllTasks）
GET    /api/tasks/search       条件筛选（filterTasks）
GET    /api/tasks/{task_id}    单个任务（getTask）
POST   /api/tasks              创建任务（createTask）
PATCH  /api/tasks/{task_id}    部分更新（updateTask）
DELETE /api/tasks/{task_id}    删除任务（deleteTask，默认 soft delete）
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from tasktrail.core.models import (
    TaskCreate,
    TaskFilters,
    TaskPriority,
    TaskRecord,
    TaskStatus,
    TaskUpdate,
)

from ..deps import get_task_store
from ..services.task_service import TaskService

router = APIRouter()


class TaskListResponse(BaseModel):
    """任务列表响应"""

    tasks: list[dict[str, Any]]
    count: int


def _list_response(tasks: list[TaskRecord]) -> TaskListResponse:
    return TaskListResponse(
        tasks=[t.to_storage() for t in tasks],
        count=len(tasks),
    )


@router.get("/api/tasks", response_model=TaskListResponse)
async def list_tasks(task_store=Depends(get_task_store)):
    """查询全部任务，按分片枚举顺序 + 分片内顺序"""
    service = TaskService(task_store)
    return _list_response(await service.list_tasks())


# 需注册在 /api/tasks/{task_id} 之前
@router.get("/api/tasks/search", response_model=TaskListResponse)
async def filter_tasks(
    status: TaskStatus | None = Query(default=None, description="按状态筛选"),
    priority: TaskPriority | None = Query(default=None, description="按优先级筛选"),
    project: str | None = Query(default=None, description="按项目筛选"),
    conversation: str | None = Query(default=None, description="按会话筛选"),
    keyword: str | None = Query(default=None, description="content 关键字，大小写不敏感"),
    task_store=Depends(get_task_store),
):
    """按条件筛选任务，条件之间为 AND"""
    service = TaskService(task_store)
    filters = TaskFilters(
        status=status,
        priority=priority,
        project=project,
        conversation=conversation,
        keyword=keyword,
    )
    return _list_response(await service.filter_tasks(filters))


@router.get("/api/tasks/{task_id}")
async def get_task(task_id: str, task_store=Depends(get_task_store)):
    """查询单个任务"""
    service = TaskService(task_store)
    task = await service.get_task(task_id)
    return task.to_storage()


@router.post("/api/tasks", status_code=201)
async def create_task(body: TaskCreate, task_store=Depends(get_task_store)):
    """创建任务，content 不能为空"""
    service = TaskService(task_store)
    task = await service.create_task(body)
    return task.to_storage()


@router.patch("/api/tasks/{task_id}")
async def update_task(
    task_id: str,
    body: TaskUpdate,
    task_store=Depends(get_task_store),
):
    """部分更新任务，只合并请求体中显式提供的字段"""
    service = TaskService(task_store)
    task = await service.update_task(task_id, body)
    return task.to_storage()


@router.delete("/api/tasks/{task_id}")
async def delete_task(
    task_id: str,
    hard_delete: bool = Query(default=False, description="true 时永久删除"),
    task_store=Depends(get_task_store),
):
    """删除任务

    - soft delete：返回 status=cancelled 的任务
    - hard delete：返回 {"id": ..., "deleted": true}
    """
    service = TaskService(task_store)
    result = await service.delete_task(task_id, hard_delete)
    if isinstance(result, TaskRecord):
        return result.to_storage()
    return result.model_dump()
