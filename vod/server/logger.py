"""
统一的日志配置模块

使用 loguru 提供日志配置，支持：
- 可配置的日志级别与格式
- 输出到控制台、文件或两者
- 按请求 ID 关联日志
"""
import os
import sys
from pathlib import Path
from loguru import logger

# 移除默认的 handler
logger.remove()

# 从环境变量读取日志配置
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT",
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<magenta>[{extra[request_id]}]</magenta> "
    "<level>{message}</level>"
)
LOG_TO_CONSOLE = os.getenv("LOG_TO_CONSOLE", "true").lower() == "true"
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"
LOG_FILE_PATH = os.getenv("LOG_FILE_PATH", "logs/vod-server.log")

# 未绑定时的默认值，保证格式中的 {extra[name]} 与 {extra[request_id]} 始终可用
NO_REQUEST_ID = "-"
logger.configure(extra={"name": "vod", "request_id": NO_REQUEST_ID})


def setup_logger():
    """设置 loguru 日志器"""

    if LOG_TO_CONSOLE:
        logger.add(
            sys.stdout,
            format=LOG_FORMAT,
            level=LOG_LEVEL,
            colorize=True,
            backtrace=True,
            diagnose=False
        )

    if LOG_TO_FILE:
        log_file = Path(LOG_FILE_PATH)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            LOG_FILE_PATH,
            format=LOG_FORMAT,
            level=LOG_LEVEL,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
            backtrace=True,
            diagnose=False
        )

    logger.debug(f"日志系统已初始化 - 级别: {LOG_LEVEL}, 控制台: {LOG_TO_CONSOLE}, 文件: {LOG_TO_FILE}")


def get_logger(name: str = None):
    """
    获取 logger 实例

    Args:
        name: 模块名称，用于日志标识

    Returns:
        loguru.Logger: 配置好的 logger 实例
    """
    if name:
        return logger.bind(name=name)
    return logger


def get_request_logger(name: str, request_id: str):
    """获取绑定了模块名和请求 ID 的 logger，请求 ID 会出现在每条日志的前缀中"""
    return logger.bind(name=name, request_id=request_id)


# 初始化日志系统（导入时自动执行）
setup_logger()

__all__ = ["logger", "LOG_FORMAT", "NO_REQUEST_ID", "get_logger", "get_request_logger", "setup_logger"]
