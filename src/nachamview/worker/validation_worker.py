# src/nachamview/worker/validation_worker.py

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from PySide6.QtCore import QCoreApplication, QObject, QThread, Signal, Slot

from nachamview.config import ValidationOptions
from nachamview.logic.validator import NachamValidator, summarize
from nachamview.models.validation_result import ValidationResult

logger = logging.getLogger(__name__)


class ValidationWorker(QObject):
    """
    検証エンジンをバックグラウンドスレッドで動かすためのワーカー。

    1回の要求につき progress を0回以上、finished をちょうど1回送る。
    token は呼び出し側が古い結果を捨てるための要求番号。
    """

    progress = Signal(int, int)          # token, pct
    finished = Signal(int, object)       # token, ValidationResult

    @Slot(int, str, object)
    def validate(self, token: int, text: str, options: Any = None) -> None:
        validator = NachamValidator(
            options,
            on_progress=lambda pct: self.progress.emit(token, pct),
        )
        result = validator.validate(text)
        self.finished.emit(token, result)


class ValidationController(QObject):
    """
    ワーカーを専用の QThread に載せ、最新の要求の結果だけを UI 側へ流す。

    キャンセルはできないので、新しい要求を出したら
    それ以前の要求の progress / finished は黙って捨てる。
    """

    progressChanged = Signal(int)
    resultReady = Signal(object)
    _requested = Signal(int, str, object)

    def __init__(self, parent: Optional[QObject] = None, threaded: bool = True) -> None:
        super().__init__(parent)
        self._token = 0
        self._thread: Optional[QThread] = None
        self._worker = ValidationWorker()

        if threaded:
            self._thread = QThread(self)
            self._worker.moveToThread(self._thread)
            self._thread.finished.connect(self._worker.deleteLater)
            self._thread.start()

            # 実行中の QThread が破棄されないよう、アプリ終了時に必ず止める
            app = QCoreApplication.instance()
            if app is not None:
                app.aboutToQuit.connect(self.shutdown)

        self._requested.connect(self._worker.validate)
        self._worker.progress.connect(self._on_progress)
        self._worker.finished.connect(self._on_finished)

    @property
    def current_token(self) -> int:
        return self._token

    def submit(
        self,
        text: str,
        options: Union[ValidationOptions, Mapping[str, Any], None] = None,
    ) -> int:
        """検証を要求し、要求番号を返す。"""
        self._token += 1
        logger.debug("validation request %d submitted (%d chars)", self._token, len(text))
        self._requested.emit(self._token, text, options)
        return self._token

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.isRunning()

    @Slot()
    def shutdown(self) -> None:
        if self._thread is not None:
            logger.debug("stopping validation thread")
            self._thread.quit()
            self._thread.wait()
            self._thread = None

    @Slot(int, int)
    def _on_progress(self, token: int, pct: int) -> None:
        if token != self._token:
            return
        self.progressChanged.emit(pct)

    @Slot(int, object)
    def _on_finished(self, token: int, result: ValidationResult) -> None:
        if token != self._token:
            logger.debug("stale validation result %d dropped (current %d)", token, self._token)
            return
        logger.info("validation request %d finished: %s", token, summarize(result))
        self.resultReady.emit(result)
