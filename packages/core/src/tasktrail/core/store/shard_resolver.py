"""分片路由 -- project -> 分片名

"My Project!" 与 "My_Project " 清洗后同为 "My-Project-"，落在同一分片；
名为 "default" 的 project 与默认分片重合。两者都是接受的碰撞。
清洗结果超过 MAX_SHARD_NAME_LENGTH 时截断，并以清洗结果的摘要作后缀，
因此清洗后相同的长 project 仍落在同一分片。
"""

import hashlib
import re

from ..config import (
    DEFAULT_SHARD_NAME,
    MAX_SHARD_NAME_LENGTH,
    SHARD_DIGEST_LENGTH,
    SHARD_NAME_SEPARATOR,
)
from .protocols import ShardIO

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9]")


def shard_for(project: str | None) -> str:
    """计算 project 对应的分片名（纯函数，无 I/O）"""
    if not project:
        return DEFAULT_SHARD_NAME
    shard_id = _UNSAFE_CHARS.sub(SHARD_NAME_SEPARATOR, project)
    if len(shard_id) <= MAX_SHARD_NAME_LENGTH:
        return shard_id

    # 清洗结果只含 ASCII，字符数即字节数
    digest = hashlib.sha256(shard_id.encode("ascii")).hexdigest()[:SHARD_DIGEST_LENGTH]
    keep = MAX_SHARD_NAME_LENGTH - SHARD_DIGEST_LENGTH - len(SHARD_NAME_SEPARATOR)
    return f"{shard_id[:keep]}{SHARD_NAME_SEPARATOR}{digest}"


class ShardResolver:
    """分片路由 + 已知分片枚举"""

    def __init__(self, shard_io: ShardIO) -> None:
        self._io = shard_io

    def shard_for(self, project: str | None) -> str:
        return shard_for(project)

    def all_shard_ids(self) -> list[str]:
        """枚举当前存在的全部分片（扫描顺序）"""
        return self._io.list_shard_ids()
