from .logging_tool import (
    CONNECT_LEVEL,
    DISCONNECT_LEVEL,
    configure,
    get_logger,
)

from .common import (
    LogEvent,
)

__all__ = [
    # 通用
    "LogEvent",
    # 日志工具
    "CONNECT_LEVEL",
    "DISCONNECT_LEVEL",
    "configure",
    "get_logger",
]
