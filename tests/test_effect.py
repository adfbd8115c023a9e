"""Tests for effects."""

import pytest

from ripplex import signal, get, set, effect


class TestEffect:
    def test_runs_immediately(self):
        o = signal(10)
        log = []
        effect(lambda: log.append(get(o)))
        assert log == [10]

    def test_reruns_on_every_write(self):
        count = signal(0)
        log = []
        effect(lambda: log.append(get(count)))
        set(count, 3)
        set(count, 10)
        assert log == [0, 3, 10]

    def test_equal_writes_rerun(self):
        count = signal(0)
        log = []
        effect(lambda: log.append(get(count)))
        set(count, 0)
        assert log == [0, 0]

    def test_untracked_signal_ignored(self):
        read = signal(1)
        other = signal(2)
        log = []
        effect(lambda: log.append(get(read)))
        set(other, 3)
        assert log == [1]

    def test_repeated_reads_subscribe_once(self):
        o = signal(1)
        log = []
        effect(lambda: log.append(get(o) + get(o)))
        set(o, 2)
        assert log == [2, 4]

    def test_decorator_returns_callback(self):
        o = signal("a")
        log = []

        @effect
        def record():
            log.append(get(o))

        assert callable(record)
        o.set("b")
        assert log == ["a", "b"]

    def test_error_in_first_run_propagates(self):
        o = signal(0)

        def broken():
            get(o)
            raise RuntimeError("effect failed")

        with pytest.raises(RuntimeError):
            effect(broken)
        # Nothing subscribed when the first run fails
        assert o.listeners == {}

    def test_nested_construction(self):
        """An effect built inside another effect's first run tracks its own reads."""
        outer_src = signal(1)
        inner_src = signal(10)
        inner_log = []
        outer_log = []

        def outer():
            outer_log.append(get(outer_src))
            if len(outer_log) == 1:
                effect(lambda: inner_log.append(get(inner_src)))

        effect(outer)
        set(inner_src, 11)
        assert inner_log == [10, 11]
        assert outer_log == [1]
