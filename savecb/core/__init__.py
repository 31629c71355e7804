"""
核心基础模块
"""

from .logger import (
    setup_logger,
    get_logger,
    log_exception,
    log_exception_full,
    log_debug,
    log_info,
    log_warning,
    log_error,
    LogLevel,
)
from .errors import SavecbError, SaveError

__all__ = [
    'setup_logger',
    'get_logger',
    'log_exception',
    'log_exception_full',
    'log_debug',
    'log_info',
    'log_warning',
    'log_error',
    'LogLevel',
    'SavecbError',
    'SaveError',
    'SaveService',
]

from .save import SaveService
