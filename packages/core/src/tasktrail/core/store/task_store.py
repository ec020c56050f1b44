"""TaskStore JSON 分片实现

记录按 project 分片存放；get/update/delete 没有 id -> 分片索引，
需要依次扫描全部分片。每次变更都是单分片的 read-modify-write，
同一分片的变更由按分片名划分的 asyncio.Lock 串行化。
"""

import asyncio
from datetime import UTC, datetime
from pathlib import Path

import structlog
from ulid import ULID

from ..config import DEFAULT_SHARD_NAME, get_shards_dir
from ..exceptions import CorruptShardError, InvalidInputError, StorageUnavailableError
from ..models.enums import TaskStatus
from ..models.shard import ShardInfo
from ..models.task import DeleteOutcome, TaskCreate, TaskFilters, TaskRecord, TaskUpdate
from .shard_io import JsonShardIO
from .shard_resolver import ShardResolver

log = structlog.get_logger()


class JsonShardTaskStore:
    """TaskStore 的 JSON 分片文件实现"""

    def __init__(self, root: str | Path) -> None:
        """
        Args:
            root: 存储根目录，分片文件位于 <root>/todos/
        """
        self._root = Path(root)
        self._io = JsonShardIO(get_shards_dir(self._root))
        self._resolver = ShardResolver(self._io)
        self._shard_locks: dict[str, asyncio.Lock] = {}
        self._corrupt_shards: set[str] = set()

        self._io.ensure_root()
        if not self._io.exists(DEFAULT_SHARD_NAME):
            self._io.write(DEFAULT_SHARD_NAME, [])

    @property
    def root(self) -> Path:
        return self._root

    @property
    def shards_dir(self) -> Path:
        return self._io.shards_dir

    @property
    def corrupt_shards(self) -> list[str]:
        """最近一次读取时无法解码的分片"""
        return sorted(self._corrupt_shards)

    async def create_task(self, data: TaskCreate) -> TaskRecord:
        """创建任务并追加到 project 对应的分片

        Raises:
            InvalidInputError: content 为空
            CorruptShardError: 目标分片已损坏
            StorageUnavailableError: 分片无法读写
        """
        if not data.content or not data.content.strip():
            raise InvalidInputError("content")
        _require_utf8(
            content=data.content, project=data.project, conversation=data.conversation
        )

        now = datetime.now(UTC)
        task = TaskRecord(
            id=str(ULID()),
            content=data.content,
            status=data.status,
            priority=data.priority,
            project=data.project or None,
            conversation=data.conversation or None,
            created_at=now,
            updated_at=now,
        )
        shard_id = self._resolver.shard_for(task.project)

        async with self._lock_for(shard_id):
            records = self._read_for_write(shard_id)
            records.append(task)
            self._write(shard_id, records)

        log.info("task_created", task_id=task.id, shard_id=shard_id)
        return task

    async def get_task(self, task_id: str) -> TaskRecord | None:
        """依次扫描分片，返回第一个匹配的任务"""
        for shard_id in self._resolver.all_shard_ids():
            for record in self._read_for_scan(shard_id):
                if record.id == task_id:
                    return record
        return None

    async def update_task(self, task_id: str, changes: TaskUpdate) -> TaskRecord | None:
        """合并显式提供的字段，刷新 updated_at

        记录留在创建时所在的分片，即使 project 被修改。
        """
        _require_utf8(**changes.changes())
        shard_id = self._locate(task_id)
        if shard_id is None:
            return None

        async with self._lock_for(shard_id):
            records = self._read_for_write(shard_id)
            index = _index_of(records, task_id)
            if index is None:
                return None

            updated = records[index].model_copy(
                update={**changes.changes(), "updated_at": datetime.now(UTC)}
            )
            records[index] = updated
            self._write(shard_id, records)

        log.info(
            "task_updated",
            task_id=task_id,
            shard_id=shard_id,
            fields=sorted(changes.changes()),
        )
        return updated

    async def delete_task(
        self,
        task_id: str,
        hard_delete: bool = False,
    ) -> TaskRecord | DeleteOutcome | None:
        """删除任务

        hard_delete=True 从分片中移除记录；否则标记为 CANCELLED 并保留。
        """
        shard_id = self._locate(task_id)
        if shard_id is None:
            return None

        async with self._lock_for(shard_id):
            records = self._read_for_write(shard_id)
            index = _index_of(records, task_id)
            if index is None:
                return None

            if hard_delete:
                del records[index]
                result: TaskRecord | DeleteOutcome = DeleteOutcome(id=task_id)
            else:
                records[index] = records[index].model_copy(
                    update={
                        "status": TaskStatus.CANCELLED,
                        "updated_at": datetime.now(UTC),
                    }
                )
                result = records[index]
            self._write(shard_id, records)

        log.info("task_deleted", task_id=task_id, shard_id=shard_id, hard=hard_delete)
        return result

    async def list_all(self) -> list[TaskRecord]:
        """按分片枚举顺序拼接全部任务"""
        tasks: list[TaskRecord] = []
        for shard_id in self._resolver.all_shard_ids():
            tasks.extend(self._read_for_scan(shard_id))
        return tasks

    async def filter_tasks(self, filters: TaskFilters) -> list[TaskRecord]:
        """在 list_all 结果上按条件筛选，保持原有顺序"""
        return [task for task in await self.list_all() if filters.matches(task)]

    async def inspect_shards(self) -> list[ShardInfo]:
        """查询各分片的记录数与损坏状态"""
        infos: list[ShardInfo] = []
        for shard_id in self._resolver.all_shard_ids():
            path = self._io.shard_path(shard_id)
            try:
                records = self._io.read(shard_id)
            except CorruptShardError:
                self._corrupt_shards.add(shard_id)
                infos.append(ShardInfo(shard_id=shard_id, path=str(path), corrupt=True))
                continue
            self._corrupt_shards.discard(shard_id)
            infos.append(ShardInfo(shard_id=shard_id, path=str(path), records=len(records)))
        return infos

    # ---- 内部辅助 ----

    def _lock_for(self, shard_id: str) -> asyncio.Lock:
        """获取分片级锁（按需创建）"""
        return self._shard_locks.setdefault(shard_id, asyncio.Lock())

    def _locate(self, task_id: str) -> str | None:
        """查找任务所在的分片名"""
        for shard_id in self._resolver.all_shard_ids():
            if _index_of(self._read_for_scan(shard_id), task_id) is not None:
                return shard_id
        return None

    def _read_for_scan(self, shard_id: str) -> list[TaskRecord]:
        """读路径：损坏分片记录日志后按空分片处理"""
        try:
            records = self._io.read(shard_id)
        except CorruptShardError as e:
            if shard_id not in self._corrupt_shards:
                log.warning(
                    "shard_corrupt",
                    shard_id=shard_id,
                    path=str(e.path),
                    error=str(e.original_error),
                )
            self._corrupt_shards.add(shard_id)
            return []
        except StorageUnavailableError as e:
            log.error("shard_read_failed", shard_id=shard_id, error=str(e.original_error))
            raise
        self._corrupt_shards.discard(shard_id)
        return records

    def _read_for_write(self, shard_id: str) -> list[TaskRecord]:
        """写路径：损坏分片拒绝写入，直到人工修复"""
        try:
            records = self._io.read(shard_id)
        except CorruptShardError as e:
            self._corrupt_shards.add(shard_id)
            log.error(
                "shard_write_refused",
                shard_id=shard_id,
                path=str(e.path),
                error=str(e.original_error),
            )
            raise
        except StorageUnavailableError as e:
            log.error("shard_read_failed", shard_id=shard_id, error=str(e.original_error))
            raise
        self._corrupt_shards.discard(shard_id)
        return records

    def _write(self, shard_id: str, records: list[TaskRecord]) -> None:
        try:
            self._io.write(shard_id, records)
        except StorageUnavailableError as e:
            log.error("shard_write_failed", shard_id=shard_id, error=str(e.original_error))
            raise


def _index_of(records: list[TaskRecord], task_id: str) -> int | None:
    for index, record in enumerate(records):
        if record.id == task_id:
            return index
    return None


def _require_utf8(**fields: object) -> None:
    """分片以 UTF-8 落盘，孤立代理字符（如 "\\ud800"）无法编码"""
    for field, value in fields.items():
        if not isinstance(value, str):
            continue
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise InvalidInputError(
                field, f"字段 {field} 含有无法编码为 UTF-8 的字符"
            ) from e
