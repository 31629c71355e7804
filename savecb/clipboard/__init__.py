# -*- coding: utf-8 -*-
"""
剪贴板导出模块

主要组件：
- select_target: 按优先级选择剪贴板目标（图像优先，其次文本）
- ClipboardReader: 读取并分类剪贴板内容
- ClipboardExporter: 单次导出流程（读取 → 对话框 → 保存）
"""

from .targets import select_target
from .reader import ClipboardContent, ClipboardReader, ContentKind
from .exporter import ClipboardExporter, ExportState

__all__ = [
    'select_target',
    'ClipboardContent',
    'ClipboardReader',
    'ContentKind',
    'ClipboardExporter',
    'ExportState',
]
