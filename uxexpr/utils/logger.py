"""
日志模块（uxexpr）

按等级输出到不同的滚动日志文件（debug/info/warning/error），
并对 Windows 上日志文件被占用导致的轮转失败做兼容处理。
"""

import logging
import os
from logging.handlers import RotatingFileHandler


# 单个日志文件上限与备份数量
LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5

# 环境变量可覆盖日志目录
LOG_DIR_ENV = "UXEXPR_LOG_DIR"

_DETAIL_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
_BRIEF_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# (文件后缀, 级别, 格式)
_LEVEL_FILES = (
    ("debug", logging.DEBUG, _DETAIL_FORMAT),
    ("info", logging.INFO, _BRIEF_FORMAT),
    ("warning", logging.WARNING, _BRIEF_FORMAT),
    ("error", logging.ERROR, _DETAIL_FORMAT),
)


class SafeRotatingFileHandler(RotatingFileHandler):
    """
    安全的日志轮转处理器。

    日志文件被其他进程占用时轮转会失败，此时继续写当前文件。
    """

    def doRollover(self) -> None:
        try:
            super().doRollover()
        except OSError:
            # 文件被占用，保留当前日志文件继续写入
            pass


class Logger:
    """
    日志管理器。

    - 指定日志目录时，每个级别一个日志文件：{name}_{level}.log
    - 未指定日志目录时只挂 NullHandler，不访问文件系统
    - logger 名称统一为 "uxexpr"
    """

    def __init__(self, log_dir: str | None = None, name: str = "uxexpr") -> None:
        """
        初始化日志管理器。

        Args:
            log_dir: 日志输出目录；为 None 时不输出日志文件。
            name: logger 名称及日志文件前缀，默认 "uxexpr"。
        """
        self.log_dir = log_dir
        self.name = name

        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)

        # 避免重复添加 handler
        if self.logger.handlers:
            return
        if log_dir is None:
            self.logger.addHandler(logging.NullHandler())
            return

        os.makedirs(log_dir, exist_ok=True)
        for suffix, level, fmt in _LEVEL_FILES:
            self.logger.addHandler(self._make_handler(suffix, level, fmt))

    def _make_handler(self, suffix: str, level: int, fmt: str) -> logging.Handler:
        """创建单个级别的滚动文件处理器。"""
        handler = SafeRotatingFileHandler(
            os.path.join(self.log_dir, f"{self.name}_{suffix}.log"),
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
            delay=True,
        )
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(fmt))
        return handler

    def get_logger(self) -> logging.Logger:
        """获取底层 logger 实例。"""
        return self.logger

    def close(self) -> None:
        """
        刷新并关闭所有日志处理器。

        进程退出前调用，释放日志文件句柄。
        """
        for handler in list(self.logger.handlers):
            handler.flush()
            handler.close()
            self.logger.removeHandler(handler)


_LOGGER_INSTANCE: Logger | None = None


def get_logger(log_dir: str | None = None, name: str = "uxexpr") -> logging.Logger:
    """
    获取全局 logger 实例（单例）。

    Args:
        log_dir: 日志输出目录，未指定时读取环境变量 UXEXPR_LOG_DIR；
                 都没有时不输出日志文件。
        name: logger 名称。
    """
    global _LOGGER_INSTANCE
    log_dir = log_dir or os.environ.get(LOG_DIR_ENV) or None
    if _LOGGER_INSTANCE is not None and log_dir and _LOGGER_INSTANCE.log_dir != log_dir:
        # 显式指定了新的日志目录，替换已有实例
        _LOGGER_INSTANCE.close()
        _LOGGER_INSTANCE = None
    if _LOGGER_INSTANCE is None:
        _LOGGER_INSTANCE = Logger(log_dir, name)
    return _LOGGER_INSTANCE.get_logger()


def close_logger() -> None:
    """关闭全局 logger 实例。"""
    global _LOGGER_INSTANCE
    if _LOGGER_INSTANCE is not None:
        _LOGGER_INSTANCE.close()
        _LOGGER_INSTANCE = None
