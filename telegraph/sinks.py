# telegraph/sinks.py
"""
Sink = uscita on/off (LED, tono, vibrazione).
Unica primitiva: set_output(active, is_dash). is_dash è solo un suggerimento
sul tipo di impulso; chi non lo usa lo ignora.
Gli errori dei driver NON devono risalire nel motore di tempo: vedi safe_output().
"""
import logging
import sys

from PyQt5.QtCore import QObject, pyqtSignal

log = logging.getLogger(__name__)


class Sink:
    def set_output(self, active: bool, is_dash: bool = False):
        raise NotImplementedError


class NullSink(Sink):
    def set_output(self, active: bool, is_dash: bool = False):
        pass


def safe_output(sink, active: bool, is_dash: bool = False):
    """Chiama il sink contenendo qualunque errore del driver."""
    if sink is None:
        return
    try:
        sink.set_output(bool(active), bool(is_dash))
    except Exception:
        log.exception("sink %r failed on set_output(%s, %s)", sink, active, is_dash)


class SignalSink(QObject):
    """
    Ponte thread-safe verso la GUI: il player gira su un thread di lavoro,
    gli slot collegati a output_changed vengono eseguiti nel thread Qt.
    """
    output_changed = pyqtSignal(bool, bool)

    def set_output(self, active: bool, is_dash: bool = False):
        self.output_changed.emit(bool(active), bool(is_dash))


class PulseSink(Sink):
    """
    Adattatore per driver che sanno solo "impulso breve"/"impulso lungo"
    (es. motori aptici): l'impulso parte sul fronte ON, il fronte OFF è muto.
    """
    def __init__(self, short_pulse, long_pulse, on_release=None):
        self.short_pulse = short_pulse
        self.long_pulse  = long_pulse
        self.on_release  = on_release

    def set_output(self, active: bool, is_dash: bool = False):
        if active:
            (self.long_pulse if is_dash else self.short_pulse)()
        elif self.on_release:
            self.on_release()


class FanOutSink(Sink):
    """Stesso segnale a più sink (es. LED + vibrazione); un guasto non ferma gli altri."""
    def __init__(self, *sinks):
        self.sinks = list(sinks)

    def add(self, sink):
        self.sinks.append(sink)

    def set_output(self, active: bool, is_dash: bool = False):
        for s in self.sinks:
            safe_output(s, active, is_dash)


class TerminalSink(Sink):
    """Per la CLI: stampa '.' o '-' a ogni accensione."""
    def __init__(self, stream=None):
        self.stream = stream or sys.stdout

    def set_output(self, active: bool, is_dash: bool = False):
        if not active:
            return
        self.stream.write("-" if is_dash else ".")
        self.stream.flush()
