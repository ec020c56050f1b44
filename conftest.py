"""全局 pytest 配置 -- 临时存储目录 fixture"""

from pathlib import Path

import pytest


@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    """提供临时存储根目录"""
    return tmp_path / "data"


@pytest.fixture
def tmp_shards_dir(tmp_data_dir: Path) -> Path:
    """临时存储根目录下的分片目录（不预先创建）"""
    return tmp_data_dir / "todos"
