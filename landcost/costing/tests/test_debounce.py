import threading

import pytest

from landcost.config import settings
from landcost.costing.debounce import RecomputeDebouncer


def test_flush_runs_only_the_last_call():
    seen = []
    d = RecomputeDebouncer(lambda x: seen.append(x) or x * 2, delay=10)

    d.trigger(1)
    d.trigger(2)
    d.trigger(3)

    assert d.pending
    assert d.flush() == 6
    assert seen == [3]
    assert d.calls == 1
    assert not d.pending


def test_timer_fires_after_quiet_period():
    done = threading.Event()
    seen = []

    def recompute(x):
        seen.append(x)
        done.set()

    d = RecomputeDebouncer(recompute, delay=0.05)
    d.trigger("a")
    d.trigger("b")

    assert done.wait(2.0)
    assert seen == ["b"]


def test_cancel_drops_pending_call():
    seen = []
    d = RecomputeDebouncer(seen.append, delay=10)

    d.trigger(1)
    d.cancel()

    assert d.flush() is None
    assert seen == []


def test_superseded_timer_does_not_run():
    seen = []
    d = RecomputeDebouncer(seen.append, delay=10)

    d.trigger(1)
    first = d._timer
    d.trigger(2)
    # first timer had already woken when trigger(2) cancelled it
    first.function(*first.args)

    assert seen == []
    assert d.pending
    d.flush()
    assert seen == [2]
    assert d.calls == 1


def test_negative_delay_is_rejected():
    with pytest.raises(ValueError):
        RecomputeDebouncer(lambda: None, delay=-1)


def test_delay_comes_from_settings():
    d = RecomputeDebouncer.from_settings(lambda: None)

    assert d.delay == settings.recompute_debounce_ms / 1000
