"""Task Store 异常体系

InvalidInputError / TaskNotFoundError 属于预期结果，由调用方按类型处理；
StorageUnavailableError / CorruptShardError 表示存储介质故障，按操作粒度上抛，
不影响其它分片。
"""

from pathlib import Path


class TaskStoreError(Exception):
    """Task Store 基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 调用方修正输入或重试后是否可能成功
        """
        super().__init__(message)
        self.recoverable = recoverable


class InvalidInputError(TaskStoreError):
    """必填字段缺失或为空"""

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"字段 {field} 不能为空", recoverable=True)
        self.field = field


class TaskNotFoundError(TaskStoreError):
    """目标 task_id 不存在"""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with id {task_id} does not exist", recoverable=True)
        self.task_id = task_id


class StorageUnavailableError(TaskStoreError):
    """存储介质不可读写（权限、磁盘满、I/O 故障等）"""

    def __init__(self, path: Path, original_error: Exception) -> None:
        """
        Args:
            path: 访问失败的文件或目录
            original_error: 原始异常
        """
        super().__init__(f"存储不可用: {path} -- {original_error}", recoverable=False)
        self.path = path
        self.original_error = original_error


class CorruptShardError(TaskStoreError):
    """分片内容无法解码

    读路径将该分片降级为空；写路径拒绝写入，直到人工修复文件。
    """

    def __init__(
        self,
        shard_id: str,
        path: Path,
        original_error: Exception | None = None,
    ) -> None:
        detail = f" -- {original_error}" if original_error is not None else ""
        super().__init__(f"分片已损坏: {shard_id} ({path}){detail}", recoverable=False)
        self.shard_id = shard_id
        self.path = path
        self.original_error = original_error
