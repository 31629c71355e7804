import os

# 必须在创建 QApplication 之前设置，测试不需要真实显示器
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from unittest.mock import MagicMock

import pytest
from PyQt6.QtCore import QBuffer, QByteArray, QIODevice, QMimeData
from PyQt6.QtGui import QColor, QImage
from PyQt6.QtWidgets import QApplication

from savecb.settings import AppSettingsManager, app_settings


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """每个测试使用独立的设置单例"""
    manager = AppSettingsManager()
    monkeypatch.setattr(app_settings, "_app_settings_manager", manager)
    return manager


@pytest.fixture
def make_image():
    """Factory fixture for solid-colour QImages."""

    def _make_image(width: int = 8, height: int = 6, color: str = "#3366cc") -> QImage:
        image = QImage(width, height, QImage.Format.Format_ARGB32)
        image.fill(QColor(color))
        return image

    return _make_image


@pytest.fixture
def png_bytes(make_image):
    buffer = QBuffer()
    buffer.open(QIODevice.OpenModeFlag.WriteOnly)
    make_image(4, 3).save(buffer, "PNG")
    buffer.close()
    return bytes(buffer.data())


@pytest.fixture
def make_clipboard():
    """Factory fixture: a QClipboard stand-in holding real QMimeData.

    Entries are (target, payload) pairs, kept in enumeration order.
    """

    def _make_clipboard(*entries):
        mime_data = QMimeData()
        for target, payload in entries:
            mime_data.setData(target, QByteArray(payload))
        clipboard = MagicMock()
        clipboard.mimeData.return_value = mime_data
        return clipboard

    return _make_clipboard
