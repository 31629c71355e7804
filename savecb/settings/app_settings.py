"""
应用设置管理器 - 集中管理所有默认配置

APP_DEFAULT_SETTINGS 定义了所有设置项的默认值：
   - 日志：开关、目录、等级、保留天数
   - 保存对话框：起始目录、默认文件名
   - 图像编码：JPEG 质量

设置只在本次运行内有效，不做持久化；命令行参数可以覆盖默认值。

使用方式：
    from savecb.settings import get_app_settings_manager

    manager = get_app_settings_manager()
    manager.apply_overrides(log_level="DEBUG")
    level = manager.get_log_level()
"""

from typing import Any, Dict


class AppSettingsManager:
    """
    应用设置管理器

    值的类型由默认值决定，覆盖时会按默认值类型转换。
    """

    APP_DEFAULT_SETTINGS = {
        # ==================== 日志设置 ====================
        "log_enabled": True,                   # 日志启用
        "log_dir": "",                         # 日志目录（空表示只输出到 stderr）
        "log_level": "WARNING",                # 日志等级: DEBUG, INFO, WARNING, ERROR
        "log_retention_days": 7,               # 日志保留天数（0表示永久保留）

        # ==================== 保存对话框 ====================
        "save_directory": "",                  # 对话框起始目录（空表示当前工作目录）
        "text_default_name": "clipboard_text.txt",
        "image_default_name": "clipboard_image.png",

        # ==================== 图像编码 ====================
        "jpeg_quality": -1,                    # JPEG 质量（0-100，-1 为编码器默认值）
    }

    def __init__(self):
        self._values: Dict[str, Any] = dict(self.APP_DEFAULT_SETTINGS)

    def get_app_setting(self, key: str, default=None) -> Any:
        """
        获取设置值

        Args:
            key: 设置键名
            default: 键不存在时返回的值
        """
        if key not in self._values:
            return default
        return self._values[key]

    def set_app_setting(self, key: str, value: Any):
        """
        设置值（按默认值的类型转换）

        Raises:
            KeyError: 未知设置项
            ValueError: 值无法转换为默认值的类型
        """
        if key not in self.APP_DEFAULT_SETTINGS:
            raise KeyError(f"unknown setting: {key}")
        self._values[key] = self._coerce(self.APP_DEFAULT_SETTINGS[key], value)

    def apply_overrides(self, **overrides):
        """批量覆盖设置，值为 None 的项保持不变"""
        for key, value in overrides.items():
            if value is not None:
                self.set_app_setting(key, value)

    def reset_app_settings(self):
        """重置为默认值"""
        self._values = dict(self.APP_DEFAULT_SETTINGS)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    @staticmethod
    def _coerce(default: Any, value: Any) -> Any:
        if isinstance(default, bool):
            if isinstance(value, str):
                return value.strip().lower() in ("1", "true", "yes", "on")
            return bool(value)
        if isinstance(default, int):
            return int(value)
        if isinstance(default, float):
            return float(value)
        if isinstance(default, str):
            return str(value)
        return value

    # ========================================================================
    #  便捷访问
    # ========================================================================

    def get_log_enabled(self) -> bool:
        return self._values["log_enabled"]

    def get_log_dir(self) -> str:
        return self._values["log_dir"]

    def get_log_level(self) -> str:
        """获取日志等级 (DEBUG, INFO, WARNING, ERROR)"""
        return self._values["log_level"].upper()

    def get_log_retention_days(self) -> int:
        return self._values["log_retention_days"]

    def get_save_directory(self) -> str:
        return self._values["save_directory"]

    def get_text_default_name(self) -> str:
        return self._values["text_default_name"]

    def get_image_default_name(self) -> str:
        return self._values["image_default_name"]

    def get_jpeg_quality(self) -> int:
        """获取 JPEG 质量，超出 0-100 的值视为编码器默认值（-1）"""
        quality = self._values["jpeg_quality"]
        if quality < 0 or quality > 100:
            return -1
        return quality


# 全局单例
_app_settings_manager = None


def get_app_settings_manager() -> AppSettingsManager:
    """获取全局设置管理器单例"""
    global _app_settings_manager
    if _app_settings_manager is None:
        _app_settings_manager = AppSettingsManager()
    return _app_settings_manager
