"""
Qt worker runnable: QRunnable + QThreadPool.
Runs a DeletionCommand off the UI thread and relays report lines and
confirmation requests to the UI as signals.
"""
from typing import Optional

from PySide6.QtCore import QRunnable, QObject, Signal, QMutex, QMutexLocker
from deldup.core.channels import CancellationToken, ConfirmationChannel
from deldup.core.models import ConfirmationRequest, Decision, DeletionParams
from deldup.commands import DeletionCommand


class WorkerSignals(QObject):
    """Separate QObject to hold signals (QRunnable cannot emit signals directly)."""
    progress = Signal(str, int, object)  # stage, current, total
    report = Signal(str)                 # one line per notable event
    confirm_requested = Signal(object)   # ConfirmationRequest
    finished = Signal(object)            # DeletionStats
    cancelled = Signal(object)           # DeletionStats of the partial run
    error = Signal(str)


class DeletionWorker(QRunnable):
    """
    Worker runnable that performs one trusted/unknown deletion run in the thread pool.

    The UI answers every `confirm_requested` signal with set_decision(); the run
    stays blocked until it does, or until stop() is called.
    After stop(), report lines keep flowing so the UI still receives the summary,
    and the run ends with `cancelled` instead of `finished`.
    Automatically deleted after execution (setAutoDelete=True).
    """
    def __init__(self, params: DeletionParams):
        super().__init__()
        self.params = params
        self.command = DeletionCommand()
        self.signals = WorkerSignals()
        self.token = CancellationToken()
        self.channel = ConfirmationChannel(self.token, on_request=self.safe_confirm_emit)
        self._mutex = QMutex()
        self.setAutoDelete(True)  # auto-delete after run() completes

    def stop(self):
        """Cancels the run; a pending confirmation is released as cancelled."""
        with QMutexLocker(self._mutex):
            self.token.cancel()

    def is_stopped(self) -> bool:
        """Returns True if the worker has been requested to stop."""
        return self.token.is_cancelled()

    def set_decision(self, decision: Decision, apply_to_all: Optional[bool] = None):
        """Answers the pending confirmation. Called from the UI thread."""
        self.channel.reply(decision, apply_to_all)

    def safe_progress_emit(self, stage: str, current: int, total=None):
        """Emits progress signal safely with mutex protection. Dropped after stop()."""
        self._emit(self.signals.progress, stage, current, total, while_running=True)

    def safe_report_emit(self, text: str):
        self._emit(self.signals.report, text)

    def safe_confirm_emit(self, request: ConfirmationRequest):
        self._emit(self.signals.confirm_requested, request, while_running=True)

    def _emit(self, signal, *args, while_running: bool = False):
        with QMutexLocker(self._mutex):
            if while_running and self.token.is_cancelled():
                return
            try:
                signal.emit(*args)
            except RuntimeError:
                # receiver already destroyed
                pass

    def run(self):
        """Main execution method. Runs in thread pool thread."""
        try:
            if self.is_stopped():
                return

            stats = self.command.execute(
                self.params,
                confirmer=self.channel,
                report_line=self.safe_report_emit,
                progress_callback=self.safe_progress_emit,
                stopped_flag=self.is_stopped
            )

            if self.is_stopped():
                self._emit(self.signals.cancelled, stats.snapshot())
            else:
                self._emit(self.signals.finished, stats.snapshot())
        except Exception as e:
            if not self.is_stopped():
                self.signals.error.emit(f"{type(e).__name__}: {str(e)}")
