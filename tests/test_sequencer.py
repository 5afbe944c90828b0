# tests/test_sequencer.py
import logging
import threading

import pytest

from conftest import FakeSleep, RecordingSink
from telegraph.errors import ConfigurationError
from telegraph.player import BackgroundPlayer
from telegraph.scheduler import CancelToken
from telegraph.sequencer import PlaybackSequencer


def test_play_sos_drives_sink_in_order(sink):
    sleep = FakeSleep()
    seq = PlaybackSequencer(sink, sleep=sleep)
    assert seq.play("... --- ...", 20) is True

    pulses = [(True, False)] * 3 + [(True, True)] * 3 + [(True, False)] * 3
    expected = []
    for on in pulses:
        expected += [on, (False, on[1])]
    assert sink.calls == expected + [(False, False)]

    assert sum(sleep.waits) == pytest.approx(3000.0)
    assert sleep.waits[:2] == [100.0, 100.0]
    assert sleep.waits[6] == 200.0        # gap tra S e O
    assert sleep.waits[7] == 300.0        # primo dash
    assert not seq.is_active


def test_play_normalizes_alternate_glyphs(sink):
    sleep = FakeSleep()
    PlaybackSequencer(sink, sleep=sleep).play("•|—", 20)
    assert sink.calls == [(True, False), (False, False), (True, True), (False, True), (False, False)]
    assert sleep.waits == [100.0, 100.0, 600.0, 300.0, 100.0, 200.0]


def test_play_empty_is_noop(sink):
    sleep = FakeSleep()
    assert PlaybackSequencer(sink, sleep=sleep).play(" xyz ", 20) is True
    assert sink.calls == [] and sleep.waits == []


@pytest.mark.parametrize("wpm", [0, -1])
def test_play_rejects_bad_wpm(sink, wpm):
    with pytest.raises(ConfigurationError):
        PlaybackSequencer(sink, sleep=FakeSleep()).play("...", wpm)
    assert sink.calls == []


@pytest.mark.parametrize("cancel_after", [1, 2, 3, 7, 8])
def test_cancel_leaves_output_off(sink, cancel_after):
    sleep = FakeSleep(cancel_after=cancel_after)
    seq = PlaybackSequencer(sink, sleep=sleep)
    assert seq.play("... --- ...", 20) is False
    assert sink.last[0] is False
    assert len(sleep.waits) == cancel_after
    assert not seq.is_active


def test_cancel_from_sink_stops_before_next_wait():
    class CancellingSink(RecordingSink):
        def set_output(self, active, is_dash=False):
            super().set_output(active, is_dash)
            if len(self.calls) == 3:
                seq.cancel()

    sink = CancellingSink()
    sleep = FakeSleep()
    seq = PlaybackSequencer(sink, sleep=sleep)
    assert seq.play("...", 20) is False
    assert len(sleep.waits) == 2
    assert sink.calls == [(True, False), (False, False), (True, False), (False, False)]


def test_external_token_cancels_session(sink):
    token = CancelToken()
    token.cancel()
    sleep = FakeSleep()
    assert PlaybackSequencer(sink, sleep=sleep).play("...", 20, token=token) is False
    assert sink.calls == [(False, False)]
    assert sleep.waits == []


def test_cancel_is_idempotent_when_idle(sink):
    seq = PlaybackSequencer(sink, sleep=FakeSleep())
    seq.cancel()
    seq.cancel()
    assert seq.play(".", 20) is True


def test_is_active_only_during_play(sink):
    seen = []
    seq = PlaybackSequencer(sink, sleep=lambda ms, token: seen.append(seq.is_active))
    seq.play(". .", 20)
    assert seen and all(seen)
    assert seq.session is None


def test_sink_failure_does_not_break_timing(caplog):
    class BrokenSink:
        def set_output(self, active, is_dash=False):
            raise RuntimeError("led unplugged")

    sleep = FakeSleep()
    with caplog.at_level(logging.ERROR):
        assert PlaybackSequencer(BrokenSink(), sleep=sleep).play("-", 20) is True
    assert sleep.waits == [300.0, 100.0, 200.0]
    assert "set_output" in caplog.text


def test_real_sleep_completes(sink):
    # 40 WPM: unit 50 ms, '.' + sentinella = 4 unità
    assert PlaybackSequencer(sink).play(".", 40) is True
    assert sink.calls == [(True, False), (False, False), (False, False)]


class _FirstOn(RecordingSink):
    def __init__(self):
        super().__init__()
        self.started = threading.Event()

    def set_output(self, active, is_dash=False):
        super().set_output(active, is_dash)
        if active:
            self.started.set()


def test_background_player_cancel():
    sink = _FirstOn()
    done = []
    player = BackgroundPlayer(PlaybackSequencer(sink), on_finished=done.append)
    player.start("----- -----", 5)
    assert sink.started.wait(2.0)
    assert player.is_active
    player.cancel()
    assert player.wait(2.0)
    assert not player.is_active
    assert sink.last == (False, False)
    assert done == [False]


def test_background_player_replaces_previous_session():
    sink = _FirstOn()
    done = []
    player = BackgroundPlayer(PlaybackSequencer(sink), on_finished=done.append)
    player.start("----- -----", 5)
    assert sink.started.wait(2.0)
    player.start(".", 40)
    assert player.wait(2.0)
    assert done == [False, True]
    assert sink.last == (False, False)


def test_background_player_validates_wpm_in_caller():
    player = BackgroundPlayer(PlaybackSequencer(RecordingSink()))
    with pytest.raises(ConfigurationError):
        player.start("...", 0)
    assert not player.is_active
    assert player.wait(0.1)


def test_background_player_cancel_when_idle():
    player = BackgroundPlayer(PlaybackSequencer(RecordingSink()))
    player.cancel()
    assert player.wait(0.1)
