# telegraph/station.py
"""
MorseStation: collega impostazioni, sink, player e manipolatore ed espone
le operazioni usate dalla UI.

  st = MorseStation(sink=SignalSink())
  st.encode("SOS")                  -> "... --- ..."
  st.start_playback("... --- ...")  # thread di lavoro
  st.key_down(); st.key_up()        # il tasto annulla il playback
  st.current_decoded_capture()
"""

from PyQt5.QtCore import QCoreApplication, QEvent, QThread

from telegraph import codec
from telegraph.capture import KeyCaptureDecoder
from telegraph.key_input import KeyInput
from telegraph.player import BackgroundPlayer
from telegraph.sequencer import PlaybackSequencer
from telegraph.settings import MorseSettings
from telegraph.sinks import NullSink


class MorseStation:
    def __init__(self, settings: MorseSettings = None, sink=None, sleep=None,
                 timer_factory=None, clock=None, on_capture_change=None, on_playback_finished=None):
        self.settings = settings or MorseSettings()
        self.sink = sink if sink is not None else NullSink()
        self.sequencer = PlaybackSequencer(self.sink, sleep=sleep)
        self.player = BackgroundPlayer(self.sequencer, on_finished=on_playback_finished)
        self.capture = KeyCaptureDecoder(
            self.settings, sink=self.sink, playback=self,
            timer_factory=timer_factory, clock=clock, on_change=on_capture_change)

    # ---------- conversione ----------
    @staticmethod
    def encode(text: str) -> str:
        return codec.encode(text)

    @staticmethod
    def decode(morse: str) -> str:
        return codec.decode(morse)

    @staticmethod
    def morse_for_playback(morse: str, text: str = "") -> str:
        """Campo Morse se compilato, altrimenti il testo codificato."""
        return morse if (morse or "").strip() else codec.encode(text)

    # ---------- velocità ----------
    @property
    def wpm(self) -> int:
        return self.settings.wpm

    def set_wpm(self, wpm) -> int:
        return self.settings.set_wpm(wpm)

    # ---------- playback ----------
    @property
    def is_active(self) -> bool:
        return self.player.is_active or self.sequencer.is_active

    is_playing = is_active

    def play(self, morse: str, wpm=None) -> bool:
        """Bloccante; annulla prima eventuali sessioni in background."""
        self.cancel_playback()
        self.player.wait(self.player.join_timeout)
        return self.sequencer.play(morse, self.settings.wpm if wpm is None else wpm)

    def start_playback(self, morse: str, wpm=None):
        return self.player.start(morse, self.settings.wpm if wpm is None else wpm)

    def cancel_playback(self):
        self.player.cancel()
        self.sequencer.cancel()

    def cancel(self):
        """
        Usato dal manipolatore: annulla e attende il thread, così l'OFF finale
        del player non arriva dopo l'indicatore del tasto.
        """
        self.cancel_playback()
        self.player.wait(self.player.join_timeout)
        self._flush_queued_output()

    @staticmethod
    def _flush_queued_output():
        # con SignalSink l'OFF del thread di lavoro è in coda: va consegnato
        # ora, prima dell'ON (diretto) del tasto
        app = QCoreApplication.instance()
        if app is not None and QThread.currentThread() == app.thread():
            QCoreApplication.sendPostedEvents(None, QEvent.MetaCall)

    # ---------- manipolatore ----------
    def key_down(self):
        self.capture.key_down()

    def key_up(self):
        return self.capture.key_up()

    def clear_capture(self):
        self.capture.clear()

    def bind_keyboard(self, target):
        """Barra spaziatrice come tasto su `target` (QApplication o widget)."""
        key_input = KeyInput(target, debounce_ms=self.settings.debounce_ms)
        key_input.bind_capture(self)
        return key_input

    @property
    def key_state(self) -> str:
        return self.capture.key_state

    def current_capture_buffer(self) -> str:
        return self.capture.buffer

    def current_decoded_capture(self) -> str:
        return self.capture.decoded()
