# telegraph/sequencer.py
"""
PlaybackSequencer
-----------------
Suona una stringa Morse su un Sink con tempi reali e annullamento cooperativo.

Uso:
  seq = PlaybackSequencer(sink)
  seq.play("... --- ...", wpm=18)      # blocca fino a fine o annullamento
  seq.cancel()                         # da un altro thread / callback

Note:
- Il WPM è campionato UNA volta all'avvio: cambiarlo a metà non tocca la
  sessione in corso.
- Il flag viene controllato prima di ogni attesa; alla fine (normale o
  annullata) l'uscita viene SEMPRE forzata a OFF.
- Una sola play() alla volta: chi chiama deve annullare la precedente
  (vedi player.BackgroundPlayer).
"""
import logging
from dataclasses import dataclass

from telegraph.codec import normalize_morse
from telegraph.scheduler import CancelToken
from telegraph.sinks import safe_output
from telegraph.timing import Pulse, tokens_of, unit_duration

log = logging.getLogger(__name__)


def _token_sleep(ms: float, token: CancelToken) -> bool:
    return token.wait(ms)


@dataclass
class PlaybackSession:
    token: CancelToken
    tokens: list
    unit: float
    cursor: int = 0

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled


class PlaybackSequencer:
    def __init__(self, sink, sleep=None):
        self.sink = sink
        # sleep(ms, token) -> True se annullato durante l'attesa
        self._sleep = sleep or _token_sleep
        self._session = None

    # ---------- API ----------
    @property
    def is_active(self) -> bool:
        return self._session is not None

    @property
    def session(self):
        return self._session

    def cancel(self):
        """Idempotente; non attende la fine della sessione."""
        session = self._session
        if session is not None:
            session.token.cancel()

    def play(self, morse: str, wpm, token: CancelToken = None) -> bool:
        """
        Ritorna True se la sequenza è stata suonata tutta, False se annullata.
        Stringa vuota (dopo normalizzazione): ritorna subito, nessuna attività.
        Solleva ConfigurationError per WPM non valido, prima di toccare il sink.
        """
        unit = unit_duration(wpm)
        tokens = tokens_of(normalize_morse(morse))
        if not tokens:
            return True

        session = PlaybackSession(token=token or CancelToken(), tokens=tokens, unit=unit)
        self._session = session
        log.debug("playback start: %d tokens, unit=%.1f ms", len(tokens), unit)
        try:
            self._run(session)
        finally:
            safe_output(self.sink, False, False)
            if self._session is session:
                self._session = None
            log.debug("playback %s at token %d/%d",
                      "cancelled" if session.cancelled else "done",
                      session.cursor, len(tokens))
        return not session.cancelled

    # ---------- Interni ----------
    def _run(self, session: PlaybackSession):
        unit = session.unit
        for tk in session.tokens:
            if session.cancelled:
                return
            if isinstance(tk, Pulse):
                safe_output(self.sink, True, tk.is_dash)
                if self._wait(tk.on_units * unit, session):
                    return
                safe_output(self.sink, False, tk.is_dash)
                if self._wait(tk.off_units * unit, session):
                    return
            else:
                if self._wait(tk.units * unit, session):
                    return
            session.cursor += 1

    def _wait(self, ms: float, session: PlaybackSession) -> bool:
        if session.cancelled:
            return True
        return bool(self._sleep(ms, session.token)) or session.cancelled
