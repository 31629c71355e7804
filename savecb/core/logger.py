"""
日志管理模块 - 统一日志记录

功能：
1. 分级日志（DEBUG/INFO/WARNING/ERROR）+ 模块标签
2. 诊断信息输出到 stderr（stdout 只留给面向用户的提示）
3. 可选：按日期写入日志文件（savecb_YYYYMMDD.log）
4. 可选：清理过期日志文件
5. 静默异常记录（替代 except: pass）

使用方式：
    from savecb.core.logger import setup_logger, log_info, log_exception

    # 初始化（在 main_app.py 启动时调用）
    setup_logger(settings_manager)

    log_info("开始读取剪贴板", "Exporter")

    try:
        some_risky_operation()
    except Exception as e:
        log_exception(e, "操作失败")
"""

import io
import re
import sys
import threading
import traceback
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional


LOG_FILE_PATTERN = re.compile(r'^savecb_(\d{8})\.log$')


class LogLevel:
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    SILENT = 50  # 静默异常，只写入文件

    _NAMES = {10: "DEBUG", 20: "INFO", 30: "WARNING", 40: "ERROR", 50: "SILENT"}

    @staticmethod
    def name(level: int) -> str:
        return LogLevel._NAMES.get(level, "UNKNOWN")

    @staticmethod
    def from_name(name: str, default: int = 30) -> int:
        for level, level_name in LogLevel._NAMES.items():
            if level_name == str(name).upper():
                return level
        return default


class Logger:
    """
    日志管理器

    特性：
    - 单例模式
    - 控制台输出到 stderr，可选写入日期日志文件
    - 支持日志级别过滤
    - 线程安全的实例创建
    """

    _instance: Optional['Logger'] = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        # 避免重复初始化
        if hasattr(self, '_initialized'):
            return

        self.enabled = True
        self.log_dir: Optional[Path] = None
        self.log_file: Optional[io.TextIOWrapper] = None

        self.min_level = LogLevel.WARNING
        self.console_min_level = LogLevel.WARNING

        self._ready = False
        self._initialized = True

    def setup(self, enabled: bool = True, log_dir: Optional[str] = None):
        """
        初始化日志系统

        Args:
            enabled: 是否启用日志
            log_dir: 日志目录路径（None 表示只输出到控制台）
        """
        self.enabled = enabled
        if not enabled or self._ready:
            return

        if log_dir:
            self.log_dir = Path(log_dir)
            try:
                self.log_dir.mkdir(parents=True, exist_ok=True)
                log_path = self.log_dir / f"savecb_{datetime.now():%Y%m%d}.log"
                # 追加模式，行缓冲
                self.log_file = open(log_path, "a", encoding="utf-8", buffering=1)
                self._write_header()
            except OSError as e:
                self.log_file = None
                self._console_write(f"[Logger] cannot open log file in {self.log_dir}: {e}")

        self._ready = True
        self.debug(f"logger ready (file: {self.log_file.name if self.log_file else '-'})", "Logger")

    def _write_header(self):
        if not self.log_file:
            return
        self.log_file.write(
            f"{'=' * 80}\n"
            f"savecb - run log\n"
            f"started: {datetime.now():%Y-%m-%d %H:%M:%S}\n"
            f"level:   {LogLevel.name(self.min_level)} (file) / "
            f"{LogLevel.name(self.console_min_level)} (console)\n"
            f"{'=' * 80}\n"
        )

    def _console_write(self, line: str):
        # 每次取当前 sys.stderr，便于测试替换
        try:
            sys.stderr.write(line + "\n")
            sys.stderr.flush()
        except (OSError, ValueError):
            pass

    def _log(self, level: int, message: str, module: str = ""):
        if not self.enabled:
            return

        timestamp = datetime.now().strftime("%H:%M:%S")
        level_name = LogLevel.name(level)
        if module:
            log_line = f"[{timestamp}] [{level_name}] [{module}] {message}"
        else:
            log_line = f"[{timestamp}] [{level_name}] {message}"

        if self.log_file and level >= self.min_level:
            try:
                self.log_file.write(log_line + "\n")
            except (OSError, ValueError):
                pass

        if level >= self.console_min_level and level != LogLevel.SILENT:
            self._console_write(log_line)

    def debug(self, message: str, module: str = ""):
        self._log(LogLevel.DEBUG, message, module)

    def info(self, message: str, module: str = ""):
        self._log(LogLevel.INFO, message, module)

    def warning(self, message: str, module: str = ""):
        self._log(LogLevel.WARNING, message, module)

    def error(self, message: str, module: str = ""):
        self._log(LogLevel.ERROR, message, module)

    def set_level(self, level: int):
        """设置文件日志最低级别"""
        self.min_level = level

    def set_console_level(self, level: int):
        """设置控制台日志最低级别"""
        self.console_min_level = level

    def exception(self, e: Exception, context: str = "", silent: bool = True):
        """
        记录异常信息（替代 except: pass）

        Args:
            e: 异常对象
            context: 上下文描述
            silent: True=只写入日志文件，False=同时输出到控制台
        """
        exc_desc = f"{type(e).__name__}: {e}"
        message = f"{context}: {exc_desc}" if context else exc_desc
        self._log(LogLevel.SILENT if silent else LogLevel.ERROR, message)

    def exception_with_traceback(self, e: Exception, context: str = ""):
        """记录异常信息（包含完整堆栈）"""
        tb = "".join(traceback.format_exception(type(e), e, e.__traceback__))
        message = f"{context}: {type(e).__name__}: {e}\n{tb}" if context else f"{type(e).__name__}: {e}\n{tb}"
        self._log(LogLevel.ERROR, message.rstrip())

    def close(self):
        """关闭日志系统"""
        if not self._ready:
            return

        self.debug("logger closed", "Logger")
        if self.log_file:
            try:
                self.log_file.flush()
                self.log_file.close()
            except OSError:
                pass
            self.log_file = None

        self._ready = False


# ============================================================================
#  全局接口
# ============================================================================

def get_logger() -> Logger:
    """获取全局日志实例"""
    return Logger()


def setup_logger(settings_manager=None):
    """
    初始化日志系统（从设置读取）

    Args:
        settings_manager: AppSettingsManager 实例，None 时使用默认值
    """
    logger = get_logger()

    if settings_manager:
        enabled = settings_manager.get_log_enabled()
        log_dir = settings_manager.get_log_dir()
        log_level = LogLevel.from_name(settings_manager.get_log_level())
        retention_days = settings_manager.get_log_retention_days()
    else:
        enabled = True
        log_dir = None
        log_level = LogLevel.WARNING
        retention_days = 0

    logger.set_level(log_level)
    logger.set_console_level(log_level)
    logger.setup(enabled=enabled, log_dir=log_dir)

    if log_dir and retention_days > 0:
        cleanup_old_logs(log_dir, retention_days)


def cleanup_old_logs(log_dir: str, retention_days: int) -> int:
    """
    清理过期的日志文件

    Args:
        log_dir: 日志目录路径
        retention_days: 保留天数（0表示永久保留）

    Returns:
        删除的文件数
    """
    if retention_days <= 0:
        return 0

    log_path = Path(log_dir)
    if not log_path.is_dir():
        return 0

    cutoff_date = datetime.now() - timedelta(days=retention_days)
    deleted_count = 0
    for file in log_path.iterdir():
        match = LOG_FILE_PATTERN.match(file.name)
        if not match or not file.is_file():
            continue
        try:
            file_date = datetime.strptime(match.group(1), "%Y%m%d")
            if file_date < cutoff_date:
                file.unlink()
                deleted_count += 1
        except (ValueError, OSError):
            continue

    if deleted_count > 0:
        log_debug(f"removed {deleted_count} expired log file(s), keeping {retention_days} day(s)", "Logger")
    return deleted_count


def log_exception(e: Exception, context: str = "", silent: bool = True):
    """记录静默异常（替代 except: pass 的全局便捷函数）"""
    get_logger().exception(e, context, silent)


def log_exception_full(e: Exception, context: str = ""):
    """记录异常（包含完整堆栈，用于调试严重错误）"""
    get_logger().exception_with_traceback(e, context)


def log_debug(message: str, module: str = ""):
    get_logger().debug(message, module)


def log_info(message: str, module: str = ""):
    get_logger().info(message, module)


def log_warning(message: str, module: str = ""):
    get_logger().warning(message, module)


def log_error(message: str, module: str = ""):
    get_logger().error(message, module)

