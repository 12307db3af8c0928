import time

import pytest

from chasm.events import AppEvent, EventHandler, KeyPress, Tick


def _reader(keys):
    pending = list(keys)

    def read_key(timeout):
        if pending:
            return pending.pop(0)
        time.sleep(min(timeout, 0.01))
        return None

    return read_key


def test_sent_event_comes_back():
    with EventHandler(tick_fps=0.01) as handler:
        handler.send(AppEvent.QUIT)
        assert handler.next(timeout=2.0) is AppEvent.QUIT


def test_sent_events_keep_order():
    with EventHandler(tick_fps=0.01) as handler:
        handler.send(AppEvent.INCREMENT)
        handler.send(AppEvent.DECREMENT)
        handler.send(AppEvent.SELECT_OPTION)
        got = [handler.next(timeout=2.0) for _ in range(3)]
    assert got == [AppEvent.INCREMENT, AppEvent.DECREMENT, AppEvent.SELECT_OPTION]


def test_ticks_are_emitted():
    with EventHandler(tick_fps=200.0) as handler:
        assert handler.next(timeout=2.0) == Tick()


def test_key_presses_are_forwarded():
    with EventHandler(read_key=_reader([KeyPress("down")]), tick_fps=0.01) as handler:
        assert handler.next(timeout=2.0) == KeyPress("down", ctrl=False)


def test_next_times_out_without_events():
    with EventHandler(tick_fps=0.01) as handler:
        with pytest.raises(TimeoutError):
            handler.next(timeout=0.05)


def test_reader_failure_is_raised():
    def broken(timeout):
        raise OSError("terminal gone")

    with EventHandler(read_key=broken, tick_fps=0.01) as handler:
        with pytest.raises(RuntimeError) as info:
            handler.next(timeout=2.0)
    assert isinstance(info.value.__cause__, OSError)


def test_close_stops_thread():
    handler = EventHandler(tick_fps=0.01)
    handler.close()
    assert handler.is_running is False


@pytest.mark.parametrize("rate", [0, -5.0])
def test_bad_tick_rate(rate):
    with pytest.raises(ValueError):
        EventHandler(tick_fps=rate)