# explain_worker.py
from PyQt5.QtCore import QObject, pyqtSignal, QRunnable, pyqtSlot
import logging

from .explain import ExplanationClient, UNAVAILABLE_MESSAGE

logger = logging.getLogger(__name__)


class ExplainSignals(QObject):
    result = pyqtSignal(int, str)       # (request_id, text)
    failed = pyqtSignal(int, str)       # (request_id, user-facing message)
    finished = pyqtSignal(int)


class ExplanationWorker(QRunnable):
    """
    Runs one explanation request off the GUI thread.
    Works on a snapshot of the configuration/state and never touches widgets.
    """
    def __init__(self, request_id, config, state, client=None):
        super().__init__()
        self.signals = ExplainSignals()
        self.request_id = request_id
        self.config = config
        self.state = state
        self.client = client

    @pyqtSlot()
    def run(self):
        try:
            client = self.client or ExplanationClient()
            text = client.explain(self.config, self.state)
            self.signals.result.emit(self.request_id, text)
        except Exception:
            logger.exception("explanation request %d failed", self.request_id)
            self.signals.failed.emit(self.request_id, UNAVAILABLE_MESSAGE)
        finally:
            self.signals.finished.emit(self.request_id)
