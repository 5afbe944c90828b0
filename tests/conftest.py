# tests/conftest.py
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class RecordingSink:
    def __init__(self):
        self.calls = []

    def set_output(self, active, is_dash=False):
        self.calls.append((active, is_dash))

    @property
    def last(self):
        return self.calls[-1] if self.calls else None


class FakeSleep:
    """sleep(ms, token) senza dormire; opzionalmente annulla alla N-esima attesa."""
    def __init__(self, cancel_after=None):
        self.waits = []
        self.cancel_after = cancel_after

    def __call__(self, ms, token):
        self.waits.append(ms)
        if self.cancel_after is not None and len(self.waits) >= self.cancel_after:
            token.cancel()
        return token.cancelled


class VirtualTime:
    """Orologio in ms + timer single-shot che scattano solo con advance()."""
    def __init__(self, now=0.0):
        self.now = float(now)
        self.timers = []

    def clock(self):
        return self.now

    def timer(self):
        t = VirtualTimer(self)
        self.timers.append(t)
        return t

    def pending(self):
        return [t for t in self.timers if t.is_pending]

    def advance(self, ms):
        end = self.now + ms
        while True:
            due = [t for t in self.pending() if t.deadline <= end]
            if not due:
                break
            t = min(due, key=lambda x: x.deadline)
            self.now = max(self.now, t.deadline)
            t.fire()
        self.now = end


class VirtualTimer:
    def __init__(self, vt):
        self.vt = vt
        self.deadline = None
        self.callback = None
        self.starts = 0

    def start(self, ms, callback):
        self.deadline = self.vt.now + ms
        self.callback = callback
        self.starts += 1

    def cancel(self):
        self.callback = None
        self.deadline = None

    @property
    def is_pending(self):
        return self.callback is not None

    def fire(self):
        cb, self.callback, self.deadline = self.callback, None, None
        if cb is not None:
            cb()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def vtime():
    return VirtualTime()


@pytest.fixture(scope="session")
def qapp():
    from PyQt5.QtCore import QCoreApplication
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
