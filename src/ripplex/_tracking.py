"""Dependency tracking engine: the heart of ripplex.

Reads made while a tracking window is open are recorded on the active
Runtime. Computed and effect construction open a window, run their function
once, and subscribe to whatever was read.

The active Runtime is held in a context variable so independent reactive
graphs (and tests) can run side by side without sharing stacks.
"""

from __future__ import annotations

import contextvars
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator, TypeVar

from ripplex._anchor import Runtime, default_runtime

if TYPE_CHECKING:
    from ripplex.signal import Signal

T = TypeVar("T")

current_runtime: contextvars.ContextVar[Runtime] = contextvars.ContextVar(
    "current_runtime", default=default_runtime
)


def get_runtime() -> Runtime:
    """The Runtime that reads, writes and transactions currently use."""
    return current_runtime.get()


@contextmanager
def isolated() -> Iterator[Runtime]:
    """Run a block against a fresh Runtime.

    Usage:
        with isolated() as rt:
            count = signal(0)
            with transaction():
                count.set(1)
                assert rt.transaction_depth == 1
    """
    runtime = Runtime()
    token = current_runtime.set(runtime)
    try:
        yield runtime
    finally:
        current_runtime.reset(token)


def start_tracking() -> None:
    """Open a tracking window. Windows nest."""
    rt = current_runtime.get()
    rt.tracking_cursors.append(len(rt.tracked_signals))


def stop_tracking() -> list[Signal]:
    """Close the innermost window and return every signal read inside it.

    Signals come back in read order, repeats included.
    """
    rt = current_runtime.get()
    cursor = rt.tracking_cursors.pop()
    signals = rt.tracked_signals[cursor:]
    del rt.tracked_signals[cursor:]
    return signals


def track(signal: Signal[T]) -> T:
    """Record a read of signal (when a window is open) and return its value."""
    rt = current_runtime.get()
    if rt.tracking_cursors:
        rt.tracked_signals.append(signal)
    return signal.value


def capture(fn: Callable[[], T]) -> tuple[T, list[Signal]]:
    """Call fn inside a tracking window. Returns (result, dependencies)."""
    start_tracking()
    try:
        result = fn()
    finally:
        dependencies = stop_tracking()
    return result, dependencies
