"""Computed values: read-only signals derived from other signals.

The producer runs once at construction inside a tracking window. Whatever
it read becomes its dependency set, permanently: a later call that reads
a different signal (conditional logic) does not subscribe to it.

Computed values are eager. Every write to a dependency re-runs the producer
right away and notifies the computed's own listeners, so chained computeds
and effects see fresh values as soon as the write returns.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from ripplex._tracking import capture
from ripplex.signal import Signal

T = TypeVar("T")


def computed(producer: Callable[[], T]) -> Signal[T]:
    """Create a read-only signal whose value is producer().

    Usage:
        count = signal(1)

        @computed
        def doubled():
            return get(count) * 2

        get(doubled)  # 2
        set(count, 10)
        get(doubled)  # 20
    """
    initial, dependencies = capture(producer)
    derived: Signal[T] = Signal(initial, writeable=False)

    def recompute(_value: object) -> None:
        # Not a write of its own: no writability check, nothing to roll back.
        # Rolling back the dependency re-runs this.
        derived._write(producer())

    for dependency in dependencies:
        dependency.subscribe(recompute)

    return derived
