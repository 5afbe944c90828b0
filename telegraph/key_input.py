# telegraph/key_input.py
"""
Input locale del manipolatore:
- Spacebar: premi = key down, rilascia = key up, con debounce.
Espone metodi bind/unbind per collegarsi a una QApplication o a un widget.
"""
from time import perf_counter

from PyQt5.QtCore import QObject, QEvent, Qt


class SpacebarFilter(QObject):
    def __init__(self, on_down, on_up, debounce_ms=2, key=Qt.Key_Space):
        super().__init__()
        self.on_down = on_down
        self.on_up   = on_up
        self.key = key
        self.debounce = debounce_ms / 1000.0
        self._last = float("-inf")
        self._pressed = False

    def eventFilter(self, obj, ev):
        kind = ev.type()
        if kind not in (QEvent.KeyPress, QEvent.KeyRelease) or ev.key() != self.key:
            return False
        if ev.isAutoRepeat():
            return True
        now = perf_counter()
        if kind == QEvent.KeyPress and not self._pressed:
            if (now - self._last) >= self.debounce:
                self._pressed = True
                self._last = now
                self.on_down()
        elif kind == QEvent.KeyRelease and self._pressed:
            # il rilascio chiude sempre la pressione, anche dentro il debounce
            self._pressed = False
            self._last = now
            self.on_up()
        return True


class KeyInput:
    def __init__(self, target, debounce_ms=2):
        self.target = target
        self.debounce_ms = debounce_ms
        self._space_filter = None

    def bind_spacebar(self, on_down, on_up):
        self.unbind()
        self._space_filter = SpacebarFilter(on_down, on_up, debounce_ms=self.debounce_ms)
        self.target.installEventFilter(self._space_filter)
        return self._space_filter

    def bind_capture(self, capture):
        return self.bind_spacebar(capture.key_down, capture.key_up)

    def unbind(self):
        if self._space_filter:
            self.target.removeEventFilter(self._space_filter)
            self._space_filter = None
