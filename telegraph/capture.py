# telegraph/capture.py
"""
KeyCaptureDecoder
-----------------
Manipolatore manuale: trasforma pressioni/rilasci in una stringa Morse.

- key_down(): annulla il playback in corso (il tasto ha priorità), memorizza
  l'istante di pressione, accende l'indicatore.
- key_up():   durata < soglia -> '.', altrimenti '-' (soglia = dash_factor·unit,
  ESATTAMENTE la soglia conta come '-'), poi riarma i due timer di
  inattività (lettera 1500 ms, parola 3500 ms).
- timer lettera: aggiunge ' ' se il buffer non finisce già con uno spazio.
- timer parola:  trasforma lo spazio finale in ' / ' (mai doppioni).

Ogni timer è a slot singolo: riarmarlo sostituisce la callback in sospeso,
quindi non si accumulano mai scatti multipli.
"""
import logging
from dataclasses import dataclass

from telegraph.codec import WORD_SEP, decode
from telegraph.scheduler import QtSingleShotTimer, monotonic_ms
from telegraph.settings import MorseSettings
from telegraph.sinks import safe_output
from telegraph.timing import dash_threshold

log = logging.getLogger(__name__)

EMPTY_CAPTURE = "(empty)"
RELEASED, TRANSMITTING = "Released", "Transmitting"


@dataclass
class CaptureState:
    letter_timer: object
    word_timer: object
    buffer: str = ""
    press_started: float = None     # ms, None = tasto non premuto

    @property
    def pressed(self) -> bool:
        return self.press_started is not None


class KeyCaptureDecoder:
    def __init__(self, settings: MorseSettings = None, sink=None, playback=None,
                 timer_factory=None, clock=None, on_change=None):
        self.settings = settings or MorseSettings()
        self.sink = sink
        self.playback = playback        # qualunque oggetto con is_active / cancel()
        self.on_change = on_change      # callback(buffer) a ogni modifica
        self._clock = clock or monotonic_ms
        factory = timer_factory or QtSingleShotTimer
        self.state = CaptureState(letter_timer=factory(), word_timer=factory())

    # ---------- API ----------
    @property
    def buffer(self) -> str:
        return self.state.buffer

    @property
    def key_state(self) -> str:
        return TRANSMITTING if self.state.pressed else RELEASED

    def decoded(self) -> str:
        trimmed = self.state.buffer.strip()
        if not trimmed:
            return EMPTY_CAPTURE
        return decode(trimmed)

    def threshold_ms(self) -> float:
        return dash_threshold(self.settings.wpm, self.settings.dash_factor)

    def classify(self, duration_ms: float) -> str:
        return "." if duration_ms < self.threshold_ms() else "-"

    def key_down(self):
        playback = self.playback
        if playback is not None and playback.is_active:
            log.debug("key down: cancelling playback")
            playback.cancel()
        if self.state.pressed:
            return  # autorepeat / doppio evento: conta la prima pressione
        self.state.press_started = self._clock()
        safe_output(self.sink, True, False)

    def key_up(self):
        """Ritorna il simbolo aggiunto, o None se non c'era una pressione aperta."""
        st = self.state
        if st.press_started is None:
            return None
        duration = max(0.0, self._clock() - st.press_started)
        st.press_started = None

        sym = self.classify(duration)
        self._set_buffer(st.buffer + sym)
        safe_output(self.sink, False, sym == "-")
        log.debug("press %.1f ms -> %r (threshold %.1f ms)", duration, sym, self.threshold_ms())

        st.letter_timer.start(self.settings.letter_gap_ms, self._on_letter_gap)
        st.word_timer.start(self.settings.word_gap_ms, self._on_word_gap)
        return sym

    def clear(self):
        st = self.state
        st.letter_timer.cancel()
        st.word_timer.cancel()
        self._set_buffer("")

    # ---------- Interni ----------
    def _on_letter_gap(self):
        buf = self.state.buffer
        if buf.strip() and not buf[-1].isspace():
            self._set_buffer(buf + " ")

    def _on_word_gap(self):
        buf = self.state.buffer
        if not buf.strip() or buf.endswith(WORD_SEP):
            return
        self._set_buffer(buf.rstrip() + WORD_SEP)

    def _set_buffer(self, value: str):
        if value == self.state.buffer:
            return
        self.state.buffer = value
        if self.on_change:
            try:
                self.on_change(value)
            except Exception:
                log.exception("on_change callback failed")
