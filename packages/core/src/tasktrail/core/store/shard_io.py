"""ShardIO JSON 文件实现

每个分片是 <shards_dir>/<shard_id>.json，内容为任务记录的 JSON 数组。
写入采用 临时文件 + fsync + os.replace，读者永远看不到半写入的分片。
"""

import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from ..config import SHARD_FILE_SUFFIX
from ..exceptions import CorruptShardError, InvalidInputError, StorageUnavailableError
from ..models.task import TaskRecord


class JsonShardIO:
    """ShardIO 的 JSON 文件实现"""

    def __init__(self, shards_dir: Path) -> None:
        self._shards_dir = Path(shards_dir)

    @property
    def shards_dir(self) -> Path:
        return self._shards_dir

    def ensure_root(self) -> None:
        """创建存储根目录与分片子目录（幂等）"""
        try:
            self._shards_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailableError(self._shards_dir, e) from e

    def shard_path(self, shard_id: str) -> Path:
        """获取分片文件路径"""
        return self._shards_dir / f"{shard_id}{SHARD_FILE_SUFFIX}"

    def exists(self, shard_id: str) -> bool:
        return self.shard_path(shard_id).is_file()

    def list_shard_ids(self) -> list[str]:
        """列出已存在的分片，按名称排序"""
        try:
            return sorted(
                path.stem
                for path in self._shards_dir.iterdir()
                if path.is_file() and path.suffix == SHARD_FILE_SUFFIX
            )
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageUnavailableError(self._shards_dir, e) from e

    def read(self, shard_id: str) -> list[TaskRecord]:
        """读取分片全部记录

        分片不存在时返回空列表。

        Raises:
            CorruptShardError: 内容不是合法的任务记录数组
            StorageUnavailableError: 文件无法读取
        """
        path = self.shard_path(shard_id)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except UnicodeDecodeError as e:
            raise CorruptShardError(shard_id, path, e) from e
        except OSError as e:
            raise StorageUnavailableError(path, e) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptShardError(shard_id, path, e) from e

        if not isinstance(data, list):
            raise CorruptShardError(
                shard_id, path, TypeError(f"期望 JSON 数组，实际为 {type(data).__name__}")
            )

        try:
            return [TaskRecord.model_validate(item) for item in data]
        except ValidationError as e:
            raise CorruptShardError(shard_id, path, e) from e

    def write(self, shard_id: str, records: list[TaskRecord]) -> None:
        """整体替换分片内容

        先写同目录临时文件并 fsync，再 os.replace 原子发布；
        任何失败都会清理临时文件，原分片保持不变。

        Raises:
            InvalidInputError: 记录含有无法编码为 UTF-8 的字符
            StorageUnavailableError: 写入或替换失败
        """
        path = self.shard_path(shard_id)
        text = json.dumps(
            [record.to_storage() for record in records],
            ensure_ascii=False,
            indent=2,
        )
        try:
            payload = text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise InvalidInputError(
                "records", f"分片 {shard_id} 含有无法编码为 UTF-8 的字符"
            ) from e

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(path.parent),
                prefix=f".{path.name}.",
                suffix=".tmp",
            )
        except OSError as e:
            raise StorageUnavailableError(path, e) from e

        try:
            with os.fdopen(fd, "wb") as tmp_handle:
                tmp_handle.write(payload)
                tmp_handle.flush()
                os.fsync(tmp_handle.fileno())
            os.replace(tmp_path, path)
        except OSError as e:
            _discard(tmp_path)
            raise StorageUnavailableError(path, e) from e
        except BaseException:
            _discard(tmp_path)
            raise


def _discard(tmp_path: str) -> None:
    """清理写入失败遗留的临时文件"""
    try:
        os.unlink(tmp_path)
    except FileNotFoundError:
        pass
