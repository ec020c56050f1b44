"""配置常量模块 -- 可通过环境变量覆盖

Store 本身不读取环境变量，存储根目录由调用方（CLI / Gateway lifespan）
通过这里解析后显式注入 TaskStore。
"""

import os
from pathlib import Path

# 默认分片名（无 project 的任务落在此分片）
DEFAULT_SHARD_NAME: str = "default"

# project 名中非字母数字字符的替换符
SHARD_NAME_SEPARATOR: str = "-"

# 存储根目录下的分片子目录
SHARDS_SUBDIR: str = "todos"

# 分片文件扩展名
SHARD_FILE_SUFFIX: str = ".json"

# 分片名长度上限，超出部分截断并追加摘要，
# 保证分片文件名（含临时文件）不超过 255 字节
MAX_SHARD_NAME_LENGTH: int = 100

# 截断后追加的摘要长度（sha256 十六进制前缀）
SHARD_DIGEST_LENGTH: int = 12


def get_data_dir() -> Path:
    """获取存储根目录"""
    return Path(os.environ.get("TASKTRAIL_DATA_DIR", "data"))


def get_shards_dir(data_dir: Path | None = None) -> Path:
    """获取分片文件所在目录"""
    return (data_dir or get_data_dir()) / SHARDS_SUBDIR
