# telegraph/serial_key.py
"""
Tasto verticale su porta seriale (adattatore USB/Arduino).
Protocollo: un byte per fronte, b'1' = key down, b'0' = key up.
La lettura gira su un thread; i fronti escono come segnali Qt, così i
QTimer del decoder vengono toccati solo dal thread della GUI.
"""
import logging
import threading

import serial
from PyQt5.QtCore import QObject, pyqtSignal

log = logging.getLogger(__name__)

KEY_DOWN, KEY_UP = b'1', b'0'


class SerialKey(QObject):
    pressed  = pyqtSignal()
    released = pyqtSignal()

    def __init__(self, port='COM3', baud=9600, parent=None):
        super().__init__(parent)
        self.port, self.baud = port, baud
        self.ser = None
        self.thread = None
        self._stop = threading.Event()
        self._down = False

    def connect_capture(self, capture):
        self.pressed.connect(capture.key_down)
        self.released.connect(capture.key_up)

    def start(self, ser=None):
        self.ser = ser or serial.Serial(self.port, self.baud, timeout=0.05)
        self._stop.clear()
        self.thread = threading.Thread(target=self._loop, name="telegraph-serial-key", daemon=True)
        self.thread.start()

    def stop(self):
        self._stop.set()
        if self.thread and self.thread is not threading.current_thread():
            self.thread.join(timeout=0.5)
        if self.ser:
            try:
                self.ser.close()
            except serial.SerialException:
                log.exception("error closing %s", self.port)
        self.ser = None
        self.thread = None

    def feed(self, b: bytes):
        """Interpreta un byte; i duplicati (due down di fila) sono ignorati."""
        if b == KEY_DOWN and not self._down:
            self._down = True
            self.pressed.emit()
        elif b == KEY_UP and self._down:
            self._down = False
            self.released.emit()

    def _loop(self):
        while not self._stop.is_set():
            try:
                b = self.ser.read(1)
            except serial.SerialException:
                log.exception("serial key %s: read failed, stopping", self.port)
                break
            if b:
                self.feed(b)
        if self._down:
            # porta chiusa a tasto premuto: non lasciare la pressione aperta
            self._down = False
            self.released.emit()
