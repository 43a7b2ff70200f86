"""Speech recognizer child process handle."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QProcess, Signal

from textcut.services.recognizer_logger import log_recognizer_command, log_recognizer_exit

logger = logging.getLogger(__name__)


class RecognitionProcess(QObject):
    """Runs the recognizer script with QProcess on the UI event loop.

    No thread is involved: QProcess delivers output and exit notifications
    as queued events, so every handler runs to completion on the UI thread.

    Signals:
        stdout_ready(bytes): One chunk of standard output.
        stderr_ready(str): One chunk of standard error.
        finished(int, bool): Exit code and whether the process crashed or was killed.
    """

    stdout_ready = Signal(bytes)
    stderr_ready = Signal(str)
    finished = Signal(int, bool)

    def __init__(self, parent: QObject | None = None):
        super().__init__(parent)
        self._process = QProcess(self)
        self._killed = False
        self._process.readyReadStandardOutput.connect(self._on_stdout)
        self._process.readyReadStandardError.connect(self._on_stderr)
        self._process.finished.connect(self._on_finished)
        self._process.errorOccurred.connect(self._on_error)

    def start(self, program: str, arguments: list[str]) -> None:
        self._killed = False
        log_recognizer_command([program] + arguments)
        self._process.start(program, arguments)

    def is_running(self) -> bool:
        return self._process.state() != QProcess.ProcessState.NotRunning

    def wait_for_started(self, msecs: int = 3000) -> bool:
        return self._process.waitForStarted(msecs)

    def wait_for_finished(self, msecs: int = 3000) -> bool:
        """Block until the child exits; ``finished`` is emitted before returning."""
        if not self.is_running():
            return True
        return self._process.waitForFinished(msecs)

    def kill(self) -> None:
        """Kill the child. Output still buffered is dropped."""
        if self.is_running():
            self._killed = True
            self._process.kill()

    def _on_stdout(self) -> None:
        data = bytes(self._process.readAllStandardOutput().data())
        if self._killed or not data:
            return
        self.stdout_ready.emit(data)

    def _on_stderr(self) -> None:
        data = bytes(self._process.readAllStandardError().data())
        if data:
            self.stderr_ready.emit(data.decode("utf-8", errors="replace"))

    def _on_finished(self, exit_code: int, status: QProcess.ExitStatus) -> None:
        crashed = self._killed or status == QProcess.ExitStatus.CrashExit
        log_recognizer_exit(exit_code, crashed)
        self.finished.emit(exit_code, crashed)

    def _on_error(self, error: QProcess.ProcessError) -> None:
        # FailedToStart never reaches finished(); report it as a crash
        if error == QProcess.ProcessError.FailedToStart:
            logger.error(f"Recognizer failed to start: {self._process.errorString()}")
            self.stderr_ready.emit(self._process.errorString() + "\n")
            log_recognizer_exit(-1, True)
            self.finished.emit(-1, True)
