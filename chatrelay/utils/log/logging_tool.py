import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.theme import Theme

from .common import LogEvent

# 自定义日志级别
CONNECT_LEVEL = 21  # 介于 INFO(20) 和 WARNING(30) 之间
DISCONNECT_LEVEL = 22
SUCCESS_LEVEL = 25
FAILURE_LEVEL = 35  # 介于 WARNING(30) 和 ERROR(40) 之间

# 注册自定义日志级别
logging.addLevelName(CONNECT_LEVEL, LogEvent.CONNECT.value.upper())
logging.addLevelName(DISCONNECT_LEVEL, LogEvent.DISCONNECT.value.upper())
logging.addLevelName(SUCCESS_LEVEL, LogEvent.SUCCESS.value.upper())
logging.addLevelName(FAILURE_LEVEL, LogEvent.FAILURE.value.upper())


class RichLoggerConfig:
    """
    Configuration class for rich logging.
    """

    _instance = None

    def __new__(cls, *args, **kwargs):
        if not cls._instance:
            cls._instance = super(RichLoggerConfig, cls).__new__(cls)
            cls._instance.__initialized = False
        return cls._instance

    def __init__(self, level: str = "INFO", log_file: str = None):
        """
        Initialize the RichLoggerConfig with a logging level and optional log file.

        :param level: The logging level (e.g., 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL').
        :param log_file: Optional path to a log file where logs will be written.
        """
        if self.__initialized:
            return
        self.__initialized = True

        self.level = level
        self.log_file = log_file
        self.console = None
        self.logger = None
        self.rich_handler = None
        self.file_handler = None
        self.configure(level=level, log_file=log_file)

    def configure(
        self,
        level: str = "INFO",
        log_file: Optional[str] = None,
    ) -> None:
        """Configure logging handlers and formatters."""

        self.reset_logger()

        if isinstance(level, str):
            level = getattr(logging, level.upper(), logging.INFO)
        self.level = level
        self.log_file = log_file

        theme = Theme(
            {
                "logging.level.connect": Style(color="bright_green"),
                "logging.level.disconnect": Style(color="bright_magenta"),
                "logging.level.success": Style(color="green", bold=True),
                "logging.level.failure": Style(color="red", bold=True),
                # markup 标签
                "connect": Style(color="bright_green"),
                "disconnect": Style(color="bright_magenta"),
                "success": Style(color="green", bold=True),
                "failure": Style(color="red", bold=True),
            }
        )
        self.console = Console(theme=theme)

        rich_format_pattern = "%(message)s"
        log_format_pattern = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        self.rich_handler = RichHandler(
            console=self.console,
            show_time=True,
            rich_tracebacks=True,
            markup=True,
        )
        self.rich_handler.setLevel(self.level)
        self.rich_handler.setFormatter(
            logging.Formatter(fmt=rich_format_pattern, datefmt="[%X]")
        )

        self.logger = logging.getLogger()
        self.logger.setLevel(self.level)
        # 清除已有 handlers，避免重复输出
        self.logger.handlers.clear()
        self.logger.addHandler(self.rich_handler)

        if self.log_file:
            self.file_handler = logging.FileHandler(
                self.log_file, mode="a", encoding="utf-8"
            )
            self.file_handler.setLevel(self.level)
            self.file_handler.setFormatter(
                logging.Formatter(fmt=log_format_pattern, datefmt="%Y-%m-%d %H:%M:%S")
            )
            self.logger.addHandler(self.file_handler)

    def reset_logger(self) -> None:
        """Reset the logger to its initial state."""
        if self.logger is not None:
            for handler in self.logger.handlers[:]:
                self.logger.removeHandler(handler)
                if handler is self.file_handler:
                    handler.close()
        self.console = None
        self.rich_handler = None
        self.file_handler = None

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """Get the configured logger."""
        if self.logger is None:
            raise ValueError("Logger has not been configured yet.")
        return logging.getLogger(name)


rich_logger = RichLoggerConfig()


def configure(level: str = "INFO", log_file: str = None) -> None:
    """Configure rich logging with the specified settings."""
    rich_logger.configure(level=level, log_file=log_file)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    获取日志记录器的便捷方法

    参数:
        name: 日志记录器名称

    返回:
        logging.Logger: 带有 connect/disconnect/success/failure 方法的日志记录器
    """
    logger = rich_logger.get_logger(name)

    def connect(message, *args, **kwargs):
        if logger.isEnabledFor(CONNECT_LEVEL):
            logger._log(CONNECT_LEVEL, f"[connect]{message}[/connect]", args, **kwargs)

    def disconnect(message, *args, **kwargs):
        if logger.isEnabledFor(DISCONNECT_LEVEL):
            logger._log(
                DISCONNECT_LEVEL, f"[disconnect]{message}[/disconnect]", args, **kwargs
            )

    def success(message, *args, **kwargs):
        if logger.isEnabledFor(SUCCESS_LEVEL):
            logger._log(SUCCESS_LEVEL, f"[success]{message}[/success]", args, **kwargs)

    def failure(message, *args, **kwargs):
        if logger.isEnabledFor(FAILURE_LEVEL):
            logger._log(FAILURE_LEVEL, f"[failure]{message}[/failure]", args, **kwargs)

    # 绑定自定义方法到 logger 对象
    logger.connect = connect
    logger.disconnect = disconnect
    logger.success = success
    logger.failure = failure

    return logger
