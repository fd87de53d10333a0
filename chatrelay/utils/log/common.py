from enum import Enum


class LogEvent(Enum):
    """Custom log event names, used as level names and markup styles."""

    CONNECT = "connect"
    DISCONNECT = "disconnect"
    # --- 成功/失败 ---
    SUCCESS = "success"
    FAILURE = "failure"
