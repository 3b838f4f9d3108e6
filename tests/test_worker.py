"""
Tests for the Qt worker and the controller that drops stale results.
"""

from PySide6.QtCore import QEventLoop, QTimer

from nachamview.models.validation_result import ValidationResult
from nachamview.worker.validation_worker import ValidationController, ValidationWorker


def test_worker_emits_progress_then_finished(qapp, minimal_file):
    worker = ValidationWorker()
    progress = []
    finished = []
    worker.progress.connect(lambda token, pct: progress.append((token, pct)))
    worker.finished.connect(lambda token, result: finished.append((token, result)))

    worker.validate(5, minimal_file, {"checkCreditos": False})

    assert progress[-1] == (5, 100)
    assert all(token == 5 for token, _ in progress)
    assert len(finished) == 1
    token, result = finished[0]
    assert token == 5
    assert isinstance(result, ValidationResult)
    assert result.is_valid


def test_controller_delivers_current_result(qapp, minimal_file):
    controller = ValidationController(threaded=False)
    results = []
    progress = []
    controller.resultReady.connect(results.append)
    controller.progressChanged.connect(progress.append)

    token = controller.submit(minimal_file)

    assert token == 1
    assert controller.current_token == 1
    assert len(results) == 1
    assert results[0].is_valid
    assert progress[-1] == 100


def test_controller_drops_stale_tokens(qapp, minimal_file):
    controller = ValidationController(threaded=False)
    results = []
    progress = []
    controller.resultReady.connect(results.append)
    controller.progressChanged.connect(progress.append)

    controller.submit(minimal_file)
    controller.submit(minimal_file + "X")
    delivered = len(results)
    progress_seen = len(progress)

    # a late answer for the first request arrives after the second one
    controller._worker.progress.emit(1, 50)
    controller._worker.finished.emit(1, ValidationResult.empty(0))

    assert controller.current_token == 2
    assert len(results) == delivered == 2
    assert len(progress) == progress_seen
    assert results[-1].global_errors


def test_threaded_controller(qapp, minimal_file):
    controller = ValidationController(threaded=True)
    results = []
    loop = QEventLoop()

    def on_result(result):
        results.append(result)
        loop.quit()

    controller.resultReady.connect(on_result)
    try:
        controller.submit(minimal_file)
        QTimer.singleShot(5000, loop.quit)
        loop.exec()
    finally:
        controller.shutdown()

    assert len(results) == 1
    assert results[0].is_valid
    assert not controller.is_running


def test_threaded_controller_stops_on_app_quit(qapp):
    controller = ValidationController(threaded=True)
    assert controller.is_running

    qapp.aboutToQuit.emit()

    assert not controller.is_running
    controller.shutdown()
