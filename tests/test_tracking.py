"""Tests for tracking windows and runtime isolation."""

import pytest

from ripplex import signal, get, effect, transaction, get_runtime, isolated
from ripplex._tracking import capture, start_tracking, stop_tracking


class TestTrackingWindow:
    def test_records_reads_in_order(self):
        a = signal(1)
        b = signal(2)
        start_tracking()
        get(b)
        get(a)
        get(b)
        assert stop_tracking() == [b, a, b]

    def test_reads_outside_window_discarded(self):
        a = signal(1)
        b = signal(2)
        with isolated() as rt:
            for _ in range(1000):
                get(a)
            assert rt.tracked_signals == []
            start_tracking()
            get(b)
            assert stop_tracking() == [b]
            assert rt.tracked_signals == []

    def test_nested_windows(self):
        a = signal(1)
        b = signal(2)
        start_tracking()
        get(a)
        start_tracking()
        get(b)
        assert stop_tracking() == [b]
        assert stop_tracking() == [a]

    def test_capture_returns_result(self):
        a = signal(3)
        result, deps = capture(lambda: get(a) * 2)
        assert result == 6
        assert deps == [a]

    def test_capture_closes_window_on_error(self):
        a = signal(3)
        depth = len(get_runtime().tracking_cursors)

        def fail():
            get(a)
            raise ValueError

        with pytest.raises(ValueError):
            capture(fail)
        assert len(get_runtime().tracking_cursors) == depth


class TestIsolated:
    def test_fresh_runtime(self):
        outer = get_runtime()
        with isolated() as rt:
            assert get_runtime() is rt
            assert rt is not outer
        assert get_runtime() is outer

    def test_transaction_state_is_separate(self):
        s = signal(0)
        log = []
        effect(lambda: log.append(get(s)))

        with transaction():
            with isolated() as rt:
                assert rt.transaction_depth == 0
                s.set(1)  # not inside a transaction in this runtime
                assert log == [0, 1]
            s.set(2)
            assert log == [0, 1]

        assert log == [0, 1, 2]
