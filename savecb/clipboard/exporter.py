# -*- coding: utf-8 -*-
"""
剪贴板导出器 - 读取剪贴板并保存到用户选择的文件

流程（每一步都作为事件循环上的后续任务执行，同一时间只有一个在进行）：
    Init → EnumeratingTargets → RetrievingContent
         → {ShowingTextDialog | ShowingImageDialog | NoFormatFound | EmptyContent}
         → {Saved | Canceled | SaveFailed} → Terminated

所有结局都只通过输出提示告知用户，进程退出码始终为 0。
"""

import sys
from enum import Enum
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from savecb.clipboard.reader import ClipboardContent, ClipboardReader, ContentKind
from savecb.clipboard.targets import describe_targets, select_target
from savecb.core.errors import SaveError
from savecb.core.logger import log_debug, log_exception_full, log_info
from savecb.core.save import SaveService
from savecb.settings import get_app_settings_manager
from savecb.ui.save_dialog import IMAGE_DIALOG, TEXT_DIALOG, ask_save_path

UNSUPPORTED_MESSAGE = "Clipboard is empty or contains an unsupported format."


class ExportState(str, Enum):
    INIT = "Init"
    ENUMERATING_TARGETS = "EnumeratingTargets"
    RETRIEVING_CONTENT = "RetrievingContent"
    SHOWING_TEXT_DIALOG = "ShowingTextDialog"
    SHOWING_IMAGE_DIALOG = "ShowingImageDialog"
    NO_FORMAT_FOUND = "NoFormatFound"
    EMPTY_CONTENT = "EmptyContent"
    SAVED = "Saved"
    CANCELED = "Canceled"
    SAVE_FAILED = "SaveFailed"
    TERMINATED = "Terminated"


def queue_on_event_loop(callback: Callable[[], None]):
    """把后续步骤排到 Qt 事件循环上"""
    QTimer.singleShot(0, callback)


class ClipboardExporter(QObject):
    """
    单次剪贴板导出

    Signals:
        finished(str): 流程结束，参数为结局状态（ExportState 的值）
    """

    finished = pyqtSignal(str)

    def __init__(
        self,
        reader: Optional[ClipboardReader] = None,
        save_service: Optional[SaveService] = None,
        ask_path: Callable = ask_save_path,
        settings_manager=None,
        scheduler: Callable[[Callable[[], None]], None] = queue_on_event_loop,
        parent=None,
    ):
        super().__init__(parent)
        self.settings_manager = settings_manager or get_app_settings_manager()
        self._reader = reader
        self.save_service = save_service or SaveService(self.settings_manager)
        self._ask_path = ask_path
        self._schedule = scheduler

        self.state = ExportState.INIT
        self.outcome: Optional[ExportState] = None

    @property
    def reader(self) -> ClipboardReader:
        # 延迟创建：QGuiApplication 存在之后才能取剪贴板
        if self._reader is None:
            self._reader = ClipboardReader()
        return self._reader

    # ========================================================================
    #  流程
    # ========================================================================

    def start(self):
        """开始导出（只能调用一次）"""
        if self.state != ExportState.INIT:
            log_debug(f"start() ignored in state {self.state.value}", "Exporter")
            return
        self._enter(ExportState.ENUMERATING_TARGETS)
        self._queue(self._enumerate_targets)

    def _enumerate_targets(self):
        targets = self.reader.available_targets()
        target = select_target(targets)

        if target is None:
            print(UNSUPPORTED_MESSAGE)
            print(f"Found targets: {describe_targets(targets)}")
            self._finish(ExportState.NO_FORMAT_FOUND)
            return

        log_info(f"selected target {target}", "Exporter")
        self._enter(ExportState.RETRIEVING_CONTENT)
        self._queue(lambda: self._retrieve_content(target))

    def _retrieve_content(self, target: str):
        payload = self.reader.request_contents(target)
        if not payload:
            print(UNSUPPORTED_MESSAGE)
            self._finish(ExportState.EMPTY_CONTENT)
            return

        content = self.reader.classify(target, payload)
        if content is None:
            print(UNSUPPORTED_MESSAGE)
            self._finish(ExportState.NO_FORMAT_FOUND)
            return

        log_debug(f"retrieved {content.description}", "Exporter")
        if content.kind == ContentKind.IMAGE:
            print("Image data detected. Opening save dialog...")
            self._enter(ExportState.SHOWING_IMAGE_DIALOG)
        else:
            print("Text data detected. Opening save dialog...")
            self._enter(ExportState.SHOWING_TEXT_DIALOG)
        self._queue(lambda: self._persist(content))

    def _persist(self, content: ClipboardContent):
        if content.kind == ContentKind.IMAGE:
            self._save_image(content)
        else:
            self._save_text(content)

    def _save_text(self, content: ClipboardContent):
        spec = TEXT_DIALOG.with_default_name(self.settings_manager.get_text_default_name())
        path = self._ask_path(spec, self.settings_manager.get_save_directory())
        if not path:
            print("Text save canceled.")
            self._finish(ExportState.CANCELED)
            return

        try:
            self.save_service.save_text(path, content.text)
        except SaveError as e:
            print(f"Error saving text file: {e.reason}", file=sys.stderr)
            self._finish(ExportState.SAVE_FAILED)
            return

        print(f"Text successfully saved to: {path}")
        self._finish(ExportState.SAVED)

    def _save_image(self, content: ClipboardContent):
        spec = IMAGE_DIALOG.with_default_name(self.settings_manager.get_image_default_name())
        path = self._ask_path(spec, self.settings_manager.get_save_directory())
        if not path:
            print("Image save canceled.")
            self._finish(ExportState.CANCELED)
            return

        try:
            self.save_service.save_image(path, content.image)
        except SaveError as e:
            print(f"Error saving image: {e.reason}", file=sys.stderr)
            self._finish(ExportState.SAVE_FAILED)
            return

        print(f"Image successfully saved to: {path}")
        self._finish(ExportState.SAVED)

    # ========================================================================
    #  状态
    # ========================================================================

    def _queue(self, step: Callable[[], None]):
        self._schedule(lambda: self._run_step(step))

    def _run_step(self, step: Callable[[], None]):
        try:
            step()
        except Exception as e:
            # 任何意外都不能让进程崩溃，也不能让事件循环一直挂着
            log_exception_full(e, f"unexpected error in state {self.state.value}")
            print(f"Unexpected error: {e}", file=sys.stderr)
            self._finish(ExportState.SAVE_FAILED)

    def _enter(self, state: ExportState):
        log_debug(f"{self.state.value} -> {state.value}", "Exporter")
        self.state = state

    def _finish(self, outcome: ExportState):
        if self.state == ExportState.TERMINATED:
            return
        self._enter(outcome)
        self.outcome = outcome
        self._enter(ExportState.TERMINATED)
        self.finished.emit(outcome.value)
