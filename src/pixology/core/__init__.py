"""
Core 模块 - 配置、日志与异常
"""
from .config import Settings, get_settings
from .exceptions import PixologyError
from .logging import setup_logging, get_logger

__all__ = ["Settings", "get_settings", "PixologyError", "setup_logging", "get_logger"]
