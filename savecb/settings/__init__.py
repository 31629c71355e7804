"""
设置模块

使用方式：
    from savecb.settings import get_app_settings_manager

    manager = get_app_settings_manager()
    quality = manager.get_jpeg_quality()
"""

from .app_settings import AppSettingsManager, get_app_settings_manager

__all__ = ['AppSettingsManager', 'get_app_settings_manager']
