import os

import pytest
from PIL import Image
from PyQt6.QtCore import QSaveFile
from PyQt6.QtGui import QImage

from savecb.core.errors import SaveError
from savecb.core.save import SaveService, image_format_for_path

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
JPEG_MAGIC = b"\xff\xd8\xff"


@pytest.fixture
def service(fresh_settings):
    return SaveService(fresh_settings)


class DiskFullSaveFile(QSaveFile):
    """QSaveFile whose device writes fail the way a full disk does."""

    def writeData(self, data):
        self.setErrorString("No space left on device")
        return -1


@pytest.fixture
def disk_full(monkeypatch):
    monkeypatch.setattr("savecb.core.save.QSaveFile", DiskFullSaveFile)


class TestImageFormatForPath:
    @pytest.mark.parametrize("path", ["/tmp/a.jpg", "/tmp/a.jpeg", "photo.tar.jpg"])
    def test_jpeg(self, path):
        assert image_format_for_path(path) == "JPEG"

    @pytest.mark.parametrize("path", ["/tmp/a.png", "/tmp/a.bmp", "/tmp/a.gif", "/tmp/noext", "/tmp/a.JPG", "/tmp/jpg"])
    def test_everything_else_is_png(self, path):
        assert image_format_for_path(path) == "PNG"


class TestSaveText:
    def test_exact_bytes(self, service, tmp_path):
        path = tmp_path / "out.txt"
        service.save_text(str(path), "hello")
        assert path.read_bytes() == b"hello"

    def test_line_endings_untouched(self, service, tmp_path):
        path = tmp_path / "out.txt"
        service.save_text(str(path), "a\r\nb\nc")
        assert path.read_bytes() == b"a\r\nb\nc"

    def test_utf8(self, service, tmp_path):
        path = tmp_path / "out.txt"
        service.save_text(str(path), "日本語")
        assert path.read_bytes() == "日本語".encode("utf-8")

    def test_overwrites(self, service, tmp_path):
        path = tmp_path / "out.txt"
        path.write_bytes(b"previous content that is longer")
        service.save_text(str(path), "new")
        assert path.read_bytes() == b"new"

    def test_returns_path(self, service, tmp_path):
        path = str(tmp_path / "out.txt")
        assert service.save_text(path, "x") == path

    def test_missing_directory(self, service, tmp_path):
        path = tmp_path / "missing" / "out.txt"
        with pytest.raises(SaveError) as exc:
            service.save_text(str(path), "hello")
        assert exc.value.path == str(path)
        assert str(path) in exc.value.reason
        assert not path.exists()

    def test_directory_as_target(self, service, tmp_path):
        with pytest.raises(SaveError):
            service.save_text(str(tmp_path), "hello")


class TestSaveImage:
    def test_jpg_is_jpeg(self, service, tmp_path, make_image):
        path = tmp_path / "shot.jpg"
        service.save_image(str(path), make_image())
        assert path.read_bytes().startswith(JPEG_MAGIC)
        with Image.open(path) as img:
            assert img.format == "JPEG"
            assert img.size == (8, 6)

    def test_jpeg_suffix(self, service, tmp_path, make_image):
        path = tmp_path / "shot.jpeg"
        service.save_image(str(path), make_image())
        assert path.read_bytes().startswith(JPEG_MAGIC)

    @pytest.mark.parametrize("name", ["shot.png", "shot.bmp", "shot.gif", "shot", "shot.JPG"])
    def test_other_names_are_png(self, service, tmp_path, make_image, name):
        path = tmp_path / name
        service.save_image(str(path), make_image())
        assert path.read_bytes().startswith(PNG_MAGIC)
        with Image.open(path) as img:
            assert img.format == "PNG"
            assert img.size == (8, 6)

    def test_overwrites(self, service, tmp_path, make_image):
        path = tmp_path / "shot.png"
        path.write_bytes(b"old")
        service.save_image(str(path), make_image())
        assert path.read_bytes().startswith(PNG_MAGIC)

    def test_null_image(self, service, tmp_path):
        path = tmp_path / "shot.png"
        with pytest.raises(SaveError) as exc:
            service.save_image(str(path), QImage())
        assert exc.value.reason == "image is empty"
        assert not path.exists()

    def test_missing_directory(self, service, tmp_path, make_image):
        path = tmp_path / "missing" / "shot.png"
        with pytest.raises(SaveError) as exc:
            service.save_image(str(path), make_image())
        assert exc.value.reason
        assert not path.exists()

    def test_jpeg_quality_setting(self, fresh_settings, tmp_path):
        noisy = QImage(64, 64, QImage.Format.Format_RGB32)
        for x in range(64):
            for y in range(64):
                noisy.setPixel(x, y, (x * 2654435761 ^ y * 40503) & 0xFFFFFF)

        fresh_settings.set_app_setting("jpeg_quality", 5)
        low = tmp_path / "low.jpg"
        SaveService(fresh_settings).save_image(str(low), noisy)

        fresh_settings.set_app_setting("jpeg_quality", 100)
        high = tmp_path / "high.jpg"
        SaveService(fresh_settings).save_image(str(high), noisy)

        assert os.path.getsize(low) < os.path.getsize(high)


class TestFailedWriteKeepsExistingFile:
    def test_text(self, service, tmp_path, disk_full):
        path = tmp_path / "notes.txt"
        path.write_bytes(b"ORIGINAL CONTENT")

        with pytest.raises(SaveError) as exc:
            service.save_text(str(path), "x" * 100000)

        assert path.read_bytes() == b"ORIGINAL CONTENT"
        assert os.listdir(tmp_path) == ["notes.txt"]
        assert exc.value.reason == f"No space left on device: {path}"

    def test_image(self, service, tmp_path, make_image, disk_full):
        path = tmp_path / "shot.png"
        path.write_bytes(b"ORIGINAL IMAGE BYTES")

        with pytest.raises(SaveError) as exc:
            service.save_image(str(path), make_image(64, 64))

        assert path.read_bytes() == b"ORIGINAL IMAGE BYTES"
        assert os.listdir(tmp_path) == ["shot.png"]
        # 报告设备的真实错误，而不是 "Unknown error"
        assert exc.value.reason == f"No space left on device: {path}"

    def test_successful_save_leaves_no_temporary_file(self, service, tmp_path, make_image):
        service.save_text(str(tmp_path / "a.txt"), "hello")
        service.save_image(str(tmp_path / "b.jpg"), make_image())
        assert sorted(os.listdir(tmp_path)) == ["a.txt", "b.jpg"]
