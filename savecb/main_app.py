"""
savecb 入口

启动 Qt 应用 → 执行一次剪贴板导出 → 退出事件循环。
所有结局（保存、取消、失败、无内容）退出码都是 0。
"""

import argparse
import sys
from typing import List, Optional

from PyQt6.QtCore import QObject, QTimer
from PyQt6.QtWidgets import QApplication

from savecb import __version__
from savecb.clipboard import ClipboardExporter
from savecb.core.logger import get_logger, log_debug, log_exception, setup_logger
from savecb.settings import get_app_settings_manager


class MainApp(QObject):
    def __init__(self, settings_manager=None, exporter: Optional[ClipboardExporter] = None):
        super().__init__()
        # 原生对话框需要 QApplication（不是 QGuiApplication）
        self.app = QApplication.instance() or QApplication(sys.argv[:1])
        self.app.setQuitOnLastWindowClosed(False)

        # Config
        self.settings_manager = settings_manager or get_app_settings_manager()

        # Logger - 在启动早期初始化
        setup_logger(self.settings_manager)
        self._logger = get_logger()
        self.app.aboutToQuit.connect(self._on_about_to_quit)

        self.exporter = exporter or ClipboardExporter(settings_manager=self.settings_manager)
        self.exporter.finished.connect(self._on_export_finished)

    def _on_export_finished(self, outcome: str):
        log_debug(f"export finished: {outcome}", "MainApp")
        self.app.quit()

    def _on_about_to_quit(self):
        """退出前收尾：关闭日志文件"""
        try:
            self._logger.close()
        except Exception as e:
            # 退出阶段不再抛异常
            log_exception(e, "closing logger")

    def run(self) -> int:
        QTimer.singleShot(0, self.exporter.start)
        self.app.exec()
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="savecb",
        description="Save the clipboard (image or text) to a file chosen in a native save dialog.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Run without arguments to save the current clipboard content.
Images are written as JPEG when the chosen name ends in .jpg/.jpeg, PNG otherwise.
""",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="diagnostic output level on stderr (default: WARNING)",
    )
    parser.add_argument("--log-dir", help="also append diagnostics to a dated log file in this directory")
    parser.add_argument("--directory", help="start directory of the save dialog (default: current directory)")
    parser.add_argument("--jpeg-quality", type=int, help="JPEG quality 0-100 (default: codec default)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings_manager = get_app_settings_manager()
    settings_manager.apply_overrides(
        log_level=args.log_level,
        log_dir=args.log_dir,
        save_directory=args.directory,
        jpeg_quality=args.jpeg_quality,
    )

    MainApp(settings_manager).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
