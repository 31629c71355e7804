from PyQt6.QtCore import QIODevice, QSaveFile
from PyQt6.QtGui import QImage, QImageWriter

from savecb.core.errors import SaveError
from savecb.core.logger import log_debug, log_info
from savecb.settings import get_app_settings_manager

JPEG_SUFFIXES = (".jpg", ".jpeg")


def image_format_for_path(path: str) -> str:
    """Pick the codec from the chosen file name.

    Only ``.jpg``/``.jpeg`` select JPEG; every other name, including
    ``.bmp``, ``.gif`` or no extension at all, is written as PNG.
    """
    # 大小写敏感：".JPG" 也按 PNG 保存
    if path.endswith(JPEG_SUFFIXES):
        return "JPEG"
    return "PNG"


class SaveService:
    """Synchronous save service for clipboard content.

    Both savers go through QSaveFile: data lands in a temporary file next to
    the target and only replaces it on commit(), so a failed write leaves an
    existing file untouched.
    """

    def __init__(self, settings_manager=None):
        self.settings_manager = settings_manager or get_app_settings_manager()

    def save_text(self, path: str, text: str) -> str:
        """Write text verbatim (UTF-8, no newline translation), replacing any existing file."""
        try:
            data = text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise SaveError(path, str(exc)) from exc

        save_file = self._open(path)
        written = save_file.write(data)
        if written != len(data):
            reason = save_file.errorString()
            self._discard(save_file)
            raise SaveError(path, self._describe(reason, path))
        self._commit(save_file, path)

        log_info(f"wrote {len(text)} characters to {path}", "SaveService")
        return path

    def save_image(self, path: str, image: QImage) -> str:
        """Encode a QImage at ``path``; the codec follows the file name."""
        if image is None or image.isNull():
            raise SaveError(path, "image is empty")

        image_format = image_format_for_path(path)
        save_file = self._open(path)
        writer = QImageWriter(save_file, image_format.encode("ascii"))
        quality = self.settings_manager.get_jpeg_quality()
        if image_format == "JPEG" and quality >= 0:
            writer.setQuality(quality)

        log_debug(
            f"encoding {image.width()}x{image.height()} image as {image_format}: {path}",
            "SaveService",
        )
        if not writer.write(image):
            # 设备写入失败时 writer 只报 UnknownError，真正原因在 QSaveFile 上
            if writer.error() == QImageWriter.ImageWriterError.UnknownError:
                reason = save_file.errorString()
            else:
                reason = writer.errorString()
            self._discard(save_file)
            raise SaveError(path, self._describe(reason or f"could not write {image_format} image", path))
        self._commit(save_file, path)

        log_info(f"wrote {image_format} image to {path}", "SaveService")
        return path

    def _open(self, path: str) -> QSaveFile:
        save_file = QSaveFile(path)
        if not save_file.open(QIODevice.OpenModeFlag.WriteOnly):
            raise SaveError(path, self._describe(save_file.errorString(), path))
        return save_file

    @staticmethod
    def _discard(save_file: QSaveFile):
        # cancelWriting() 之后 commit() 只删除临时文件，不会替换目标文件
        save_file.cancelWriting()
        save_file.commit()

    def _commit(self, save_file: QSaveFile, path: str):
        # commit() 失败时临时文件会被删除，原文件保持不变
        if not save_file.commit():
            raise SaveError(path, self._describe(save_file.errorString(), path))

    @staticmethod
    def _describe(reason: str, path: str) -> str:
        return f"{reason or 'Unknown error'}: {path}"
