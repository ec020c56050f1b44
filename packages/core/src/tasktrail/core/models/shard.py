"""分片概况模型 -- 供 CLI 与 readiness 检查使用"""

from pydantic import BaseModel, Field


class ShardInfo(BaseModel):
    """单个分片的概况"""

    shard_id: str = Field(description="分片名")
    path: str = Field(description="分片文件路径")
    records: int = Field(default=0, description="记录数（损坏时为 0）")
    corrupt: bool = Field(default=False, description="是否无法解码")
