"""CLI 入口模块 -- python -m tasktrail.core <command>

支持的命令：
  shards  列出全部分片及其记录数、损坏状态
"""

import asyncio
import sys

from .config import get_data_dir
from .exceptions import TaskStoreError


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m tasktrail.core <command>")
        print("命令:")
        print("  shards  列出全部分片及其记录数、损坏状态")
        sys.exit(1)

    command = sys.argv[1]

    if command == "shards":
        try:
            corrupt = asyncio.run(show_shards())
        except TaskStoreError as e:
            print(f"存储错误: {e}", file=sys.stderr)
            sys.exit(1)
        sys.exit(1 if corrupt else 0)
    else:
        print(f"未知命令: {command}")
        print("可用命令: shards")
        sys.exit(1)


async def show_shards() -> int:
    """打印分片概况，返回损坏分片数量"""
    from .store import create_task_store

    data_dir = get_data_dir()
    print(f"存储目录: {data_dir}")

    store = create_task_store(data_dir)
    infos = await store.inspect_shards()

    for info in infos:
        state = "CORRUPT" if info.corrupt else f"{info.records} 条记录"
        print(f"  {info.shard_id:<32} {state}")

    corrupt = sum(1 for info in infos if info.corrupt)
    print(f"共 {len(infos)} 个分片，损坏 {corrupt} 个")
    return corrupt


if __name__ == "__main__":
    main()
