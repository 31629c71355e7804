"""
剪贴板目标选择

剪贴板所有者会公布一组类型标识（"image/png"、"text/plain"、"UTF8_STRING" ...），
这里按优先级挑选其中一个：图像优先，其次纯文本。
"""

from typing import Iterable, Optional

IMAGE_PREFIX = "image/"
TEXT_TARGETS = ("text/plain", "UTF8_STRING")


def is_image_target(target: str) -> bool:
    return target.startswith(IMAGE_PREFIX)


def is_text_target(target: str) -> bool:
    return target in TEXT_TARGETS


def select_target(targets: Iterable[str]) -> Optional[str]:
    """
    选择要读取的目标

    第一轮找 "image/" 前缀，第二轮找 "text/plain" 或 "UTF8_STRING"；
    同类多个时取枚举顺序中的第一个。

    Returns:
        选中的目标，都不支持时返回 None
    """
    targets = list(targets)

    for target in targets:
        if is_image_target(target):
            return target

    for target in targets:
        if is_text_target(target):
            return target

    return None


def describe_targets(targets: Iterable[str]) -> str:
    """逗号分隔的目标列表，用于提示信息"""
    return ", ".join(targets)
