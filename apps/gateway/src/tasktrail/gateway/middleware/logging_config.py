"""structlog 配置模块

Gateway 与 Task Store 共用一套 structlog -> 标准库 logging 管道：
- TASKTRAIL_LOG_FORMAT: "dev"（默认，pretty print）或 "json"
- TASKTRAIL_LOG_LEVEL: 全局日志级别，默认 INFO
- TASKTRAIL_STORE_LOG_LEVEL: tasktrail.core 日志级别，默认跟随全局级别
- LOGFIRE_SEND_TO_LOGFIRE: "true" 时启用 Logfire APM
"""

import logging
import os

import structlog
from structlog.types import EventDict, WrappedLogger

STORE_LOGGER_NAME = "tasktrail.core"
GATEWAY_LOGGER_NAME = "tasktrail.gateway"

# 表示存储介质故障的 store 事件，运维需要关注
STORAGE_FAULT_EVENTS = frozenset(
    {
        "shard_corrupt",
        "shard_write_refused",
        "shard_read_failed",
        "shard_write_failed",
    }
)


def add_component(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """按 logger 名标注来源组件：store / gateway"""
    name = event_dict.get("logger") or ""
    if name.startswith(STORE_LOGGER_NAME):
        event_dict.setdefault("component", "store")
    elif name.startswith(GATEWAY_LOGGER_NAME):
        event_dict.setdefault("component", "gateway")
    return event_dict


def flag_storage_fault(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """分片故障事件附加 storage_fault=True，便于告警过滤"""
    if event_dict.get("event") in STORAGE_FAULT_EVENTS:
        event_dict["storage_fault"] = True
    return event_dict


def _level(name: str | None, default: int) -> int:
    if not name:
        return default
    return getattr(logging, name.upper(), default)


def setup_logging(
    log_format: str | None = None,
    log_level: str | None = None,
    store_log_level: str | None = None,
) -> None:
    """初始化 structlog 配置

    参数优先于同名环境变量。
    """
    log_format = log_format or os.environ.get("TASKTRAIL_LOG_FORMAT", "dev")
    root_level = _level(log_level or os.environ.get("TASKTRAIL_LOG_LEVEL"), logging.INFO)
    store_level = _level(
        store_log_level or os.environ.get("TASKTRAIL_STORE_LOG_LEVEL"), root_level
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_component,
        flag_storage_fault,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer(
            ensure_ascii=False
        )
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(root_level)

    logging.getLogger(STORE_LOGGER_NAME).setLevel(store_level)


def setup_logfire() -> None:
    """LOGFIRE_SEND_TO_LOGFIRE=true 时启用 Logfire（需安装 logfire extra）"""
    if os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower() != "true":
        return
    try:
        import logfire

        logfire.configure()
        logfire.instrument_fastapi()
    except Exception as e:
        structlog.get_logger().warning("logfire_init_failed", error=str(e))
