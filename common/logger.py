import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

# 用于打印日志时，根据不同日志级别按不同颜色显示
import colorlog

# 配置参数化（LOG_DIR、LOG_LEVEL 可通过环境变量覆盖）
LOG_NAME = "app"
LOG_FILENAME = f"{LOG_NAME}.log"
LOG_DIR = os.getenv("LOG_DIR", "./logs")
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5
FILE_ENCODING = "utf-8"  # 明确设置文件编码


def resolve_log_level(level_name: Optional[str]) -> int:
    """日志级别名称转为数值，无法识别的名称（如 verbose）回退到 DEBUG"""
    level = logging.getLevelName((level_name or "DEBUG").upper())
    return level if isinstance(level, int) else logging.DEBUG


DEFAULT_LOG_LEVEL = resolve_log_level(os.getenv("LOG_LEVEL"))  # 日志打印级别

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'white',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'bold_red',
}


def configure_logging(
        logger_name: str,
        log_level: int = DEFAULT_LOG_LEVEL,
        log_dir: str = LOG_DIR,
        log_filename: str = LOG_FILENAME,
        max_log_size: int = MAX_LOG_SIZE,
        backup_count: int = BACKUP_COUNT,
        log_format: Optional[str] = None,
        file_encoding: str = FILE_ENCODING
) -> logging.Logger:
    """
    配置并返回一个带文件和控制台输出的日志记录器

    注意：控制台输出固定写到 stderr。stdio 模式的 MCP Server 使用 stdout 传输协议消息，
    日志一旦写入 stdout 会破坏客户端的消息解析。
    """
    os.makedirs(log_dir, exist_ok=True)
    log_file_path = os.path.join(log_dir, log_filename)

    if not log_format:
        log_format = (
            "%(asctime)s - %(process)d - %(threadName)s - "
            "%(name)s - %(levelname)s - %(message)s"
        )

    _logger = logging.getLogger(logger_name)

    # 防止日志重复输出
    if not _logger.handlers:
        _logger.setLevel(log_level)

        # 配置文件处理器
        file_handler = RotatingFileHandler(
            log_file_path,
            maxBytes=max_log_size,
            backupCount=backup_count,
            encoding=file_encoding  # 设置文件编码
        )
        file_handler.setFormatter(logging.Formatter(log_format))
        _logger.addHandler(file_handler)

        # 配置控制台处理器，使用colorlog为不同级别设置颜色
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(colorlog.ColoredFormatter(
            "%(log_color)s" + log_format,
            log_colors=LOG_COLORS
        ))
        _logger.addHandler(console_handler)

    return _logger
