"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含存储目录可写性、分片状态、磁盘空间。
"""

import os
import shutil

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查 -- 验证存储可用性

    检查项：
    1. storage: 分片目录存在且可写
    2. shards: 分片数量与损坏分片列表（损坏分片只读降级，不影响就绪）
    3. disk_space_mb: 磁盘剩余空间
    """
    checks = {}
    all_ok = True
    task_store = getattr(request.app.state, "task_store", None)

    # 1. 分片目录检查
    if task_store is None:
        checks["storage"] = "error: task store not initialized"
        all_ok = False
    else:
        shards_dir = task_store.shards_dir
        if not shards_dir.is_dir():
            checks["storage"] = "error: directory does not exist"
            all_ok = False
        elif not os.access(shards_dir, os.W_OK):
            checks["storage"] = "error: directory is not writable"
            all_ok = False
        else:
            checks["storage"] = "ok"

    # 2. 分片状态
    if task_store is not None and all_ok:
        try:
            infos = await task_store.inspect_shards()
            checks["shards"] = {
                "count": len(infos),
                "corrupt": [info.shard_id for info in infos if info.corrupt],
            }
        except Exception as e:
            log.warning("ready_check_error", error=str(e))
            checks["shards"] = f"error: {str(e)}"
            all_ok = False

    # 3. 磁盘空间检查
    try:
        target = task_store.shards_dir if task_store is not None else "/"
        disk_usage = shutil.disk_usage(target)
        checks["disk_space_mb"] = disk_usage.free // (1024 * 1024)
    except OSError:
        checks["disk_space_mb"] = 0
        all_ok = False

    status_code = 200 if all_ok else 503
    status_text = "ready" if all_ok else "not_ready"

    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_text,
            "checks": checks,
        },
    )
