"""
界面模块

- save_dialog: 原生保存对话框（文本 / 图像）
"""

from .save_dialog import IMAGE_DIALOG, TEXT_DIALOG, SaveDialogSpec, ask_save_path

__all__ = ['IMAGE_DIALOG', 'TEXT_DIALOG', 'SaveDialogSpec', 'ask_save_path']
