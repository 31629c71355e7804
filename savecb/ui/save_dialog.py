"""
保存对话框 - 文本 / 图像两种变体

使用系统原生的文件保存对话框（QFileDialog 静态方法默认使用原生对话框），
没有父窗口，阻塞直到用户确认或取消。
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from PyQt6.QtWidgets import QFileDialog

from savecb.core.logger import log_debug


@dataclass(frozen=True)
class SaveDialogSpec:
    """对话框参数：标题、默认文件名、过滤器 (显示名, 通配符)"""
    title: str
    default_name: str
    filters: Tuple[Tuple[str, str], ...]

    def name_filter(self) -> str:
        # Qt 过滤器格式: "Text Files (*.txt);;..."，显示名里已带通配符
        return ";;".join(label for label, _pattern in self.filters)

    def with_default_name(self, default_name: str) -> 'SaveDialogSpec':
        return SaveDialogSpec(self.title, default_name, self.filters)


TEXT_DIALOG = SaveDialogSpec(
    title="Save Text File",
    default_name="clipboard_text.txt",
    filters=(("Text Files (*.txt)", "*.txt"),),
)

IMAGE_DIALOG = SaveDialogSpec(
    title="Save Image File",
    default_name="clipboard_image.png",
    filters=(
        ("PNG Image (*.png)", "*.png"),
        ("JPEG Image (*.jpg)", "*.jpg"),
    ),
)


def ask_save_path(spec: SaveDialogSpec, directory: Optional[str] = None) -> Optional[str]:
    """
    弹出保存对话框

    Args:
        spec: 对话框参数
        directory: 起始目录（None 或空表示当前工作目录）

    Returns:
        用户选择的绝对路径，取消时返回 None
    """
    start_path = os.path.join(directory or os.getcwd(), spec.default_name)
    log_debug(f"opening '{spec.title}' at {start_path}", "SaveDialog")

    file_path, _selected_filter = QFileDialog.getSaveFileName(
        None, spec.title, start_path, spec.name_filter()
    )
    if not file_path:
        return None
    return os.path.abspath(file_path)
