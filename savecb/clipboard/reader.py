# -*- coding: utf-8 -*-
"""
剪贴板读取

封装 QClipboard，提供目标枚举、内容读取和内容分类。
"""

import io
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from PIL import Image
from PyQt6.QtGui import QGuiApplication, QImage

from savecb.clipboard.targets import is_image_target
from savecb.core.logger import log_debug, log_exception


class ContentKind(str, Enum):
    IMAGE = "image"
    TEXT = "text"


@dataclass
class ClipboardContent:
    """剪贴板内容（image 与 text 只有一个有值）"""
    kind: ContentKind
    target: str
    image: Optional[QImage] = None
    text: Optional[str] = None

    @property
    def description(self) -> str:
        if self.kind == ContentKind.IMAGE:
            return f"[image {self.image.width()}x{self.image.height()} from {self.target}]"
        return f"[text {len(self.text)} chars from {self.target}]"


def pil_to_qimage(pil_image: Image.Image) -> QImage:
    """PIL Image → QImage（复制一份，脱离 PIL 缓冲区）"""
    image = pil_image.convert("RGBA")
    width, height = image.size
    data = image.tobytes("raw", "RGBA")
    qimage = QImage(data, width, height, width * 4, QImage.Format.Format_RGBA8888)
    return qimage.copy()


def decode_image(payload: bytes) -> Optional[QImage]:
    """
    尝试把字节解码为位图

    先用 Qt 自带的图像插件，失败后再交给 Pillow（例如缺少 webp 插件时）。

    Returns:
        解码后的 QImage，无法解码时返回 None
    """
    image = QImage.fromData(payload)
    if not image.isNull():
        return image

    try:
        with Image.open(io.BytesIO(payload)) as pil_image:
            pil_image.load()
            log_debug(f"Qt could not decode payload, Pillow read it as {pil_image.format}", "ClipboardReader")
            return pil_to_qimage(pil_image)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        log_exception(e, "Pillow could not decode clipboard payload")
        return None


def decode_text(payload: bytes) -> Optional[str]:
    """UTF-8 解码，失败返回 None"""
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError:
        return None


class ClipboardReader:
    """
    剪贴板读取器

    使用示例:
        reader = ClipboardReader()
        targets = reader.available_targets()
        payload = reader.request_contents("image/png")
        content = reader.classify("image/png", payload)
    """

    def __init__(self, clipboard=None):
        # QGuiApplication.clipboard() 需要已经创建 QGuiApplication
        self._clipboard = clipboard if clipboard is not None else QGuiApplication.clipboard()

    def available_targets(self) -> List[str]:
        """当前剪贴板所有者公布的类型标识（保持原始顺序）"""
        mime_data = self._clipboard.mimeData()
        if mime_data is None:
            return []
        targets = list(mime_data.formats())
        log_debug(f"clipboard targets: {targets}", "ClipboardReader")
        return targets

    def request_contents(self, target: str) -> bytes:
        """
        读取指定目标的原始字节

        所有者在枚举和读取之间失去所有权时可能返回空字节，这不是错误。
        """
        mime_data = self._clipboard.mimeData()
        if mime_data is None:
            return b""
        payload = bytes(mime_data.data(target))
        log_debug(f"received {len(payload)} bytes for {target}", "ClipboardReader")
        return payload

    def classify(self, target: str, payload: bytes) -> Optional[ClipboardContent]:
        """
        判断内容是图像还是文本

        图像优先（仅对 image/* 目标尝试解码）；否则按文本解码。

        Returns:
            ClipboardContent，空内容或无法识别时返回 None
        """
        if not payload:
            return None

        if is_image_target(target):
            image = decode_image(payload)
            if image is not None:
                return ClipboardContent(ContentKind.IMAGE, target, image=image)

        text = decode_text(payload)
        if text is not None:
            return ClipboardContent(ContentKind.TEXT, target, text=text)

        return None
