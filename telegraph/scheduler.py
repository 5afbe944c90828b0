# telegraph/scheduler.py
"""
Primitive di tempo:
- CancelToken: flag di annullamento cooperativo + attesa interrompibile
- QtSingleShotTimer: timer "a slot singolo" su QTimer (riarmare = sostituire)
- monotonic_ms: orologio in millisecondi
"""
import threading
from time import perf_counter

from PyQt5.QtCore import QObject, QTimer


def monotonic_ms() -> float:
    return perf_counter() * 1000.0


class CancelToken:
    """Un token per sessione: chi lo possiede può annullarla, nessun altro."""
    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, ms: float) -> bool:
        """Dorme `ms` millisecondi; ritorna True (subito) se annullato."""
        return self._event.wait(max(0.0, ms) / 1000.0)


class QtSingleShotTimer(QObject):
    """
    QTimer single-shot con al massimo UNA callback in sospeso: start() su un
    timer già armato sostituisce la callback precedente.
    Va usato dal thread che possiede l'event loop Qt.
    """
    def __init__(self, parent=None):
        super().__init__(parent)
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._callback = None

    def start(self, ms: float, callback):
        self._timer.stop()
        self._callback = callback
        self._timer.start(max(0, int(round(ms))))

    def cancel(self):
        self._timer.stop()
        self._callback = None

    @property
    def is_pending(self) -> bool:
        return self._timer.isActive()

    def _fire(self):
        cb, self._callback = self._callback, None
        if cb is not None:
            cb()
