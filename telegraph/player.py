# telegraph/player.py
"""
Esegue PlaybackSequencer.play su un thread separato, così la GUI (e il
manipolatore) restano reattivi. Una sola sessione attiva: start() annulla
e attende la precedente prima di partire.
"""
import logging
import threading

from telegraph.scheduler import CancelToken
from telegraph.timing import unit_duration

log = logging.getLogger(__name__)


class BackgroundPlayer:
    def __init__(self, sequencer, on_finished=None, join_timeout: float = 1.0):
        self.sequencer = sequencer
        self.on_finished = on_finished      # callback(completed: bool), dal thread di lavoro
        self.join_timeout = float(join_timeout)
        self._thread = None
        self._token = None
        self._lock = threading.Lock()

    @property
    def is_active(self) -> bool:
        th = self._thread
        return th is not None and th.is_alive()

    def start(self, morse: str, wpm):
        unit_duration(wpm)  # WPM non valido: errore qui, nel thread chiamante
        with self._lock:
            self._stop_previous()
            token = CancelToken()
            self._token = token
            self._thread = threading.Thread(
                target=self._run, args=(morse, wpm, token),
                name="telegraph-playback", daemon=True)
            self._thread.start()
        return token

    def cancel(self):
        token = self._token
        if token is not None:
            token.cancel()

    def wait(self, timeout: float = None) -> bool:
        """True se non c'è (più) nessuna sessione in corso."""
        th = self._thread
        if th is None:
            return True
        th.join(timeout)
        return not th.is_alive()

    # ───────── internals
    def _stop_previous(self):
        if self._token is not None:
            self._token.cancel()
        th = self._thread
        if th is not None and th.is_alive() and th is not threading.current_thread():
            th.join(self.join_timeout)
            if th.is_alive():
                log.warning("previous playback did not stop within %.1f s", self.join_timeout)

    def _run(self, morse, wpm, token):
        completed = False
        try:
            completed = self.sequencer.play(morse, wpm, token=token)
        except Exception:
            log.exception("playback failed")
        finally:
            if self.on_finished:
                try:
                    self.on_finished(completed)
                except Exception:
                    log.exception("on_finished callback failed")
