"""Data anchor: plain Python structures that hold the engine's ambient state.

Signals carry their own value and listeners. Everything else the engine
needs between calls (the tracking stack, the rollback log, the deferred
effect queue) lives on a Runtime. Behavior modules read and mutate these
lists; they never keep state of their own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from ripplex.signal import Signal


class Runtime:
    """Tracking and transaction state for one reactive graph."""

    __slots__ = (
        "tracked_signals",
        "tracking_cursors",
        "transaction_depth",
        "rollback_cursors",
        "rollbacks",
        "effect_cursors",
        "effect_queue",
    )

    def __init__(self) -> None:
        # Tracking windows: every read, and where each open window starts.
        self.tracked_signals: list[Signal] = []
        self.tracking_cursors: list[int] = []

        # Transactions
        self.transaction_depth: int = 0
        self.rollback_cursors: list[int] = []
        self.rollbacks: list[tuple[Signal, object]] = []  # (signal, previous value)
        self.effect_cursors: list[int] = []
        self.effect_queue: list[Callable[[], None]] = []

    def __repr__(self) -> str:
        return (
            f"Runtime(depth={self.transaction_depth}, "
            f"rollbacks={len(self.rollbacks)}, queued={len(self.effect_queue)})"
        )


# The runtime used when no other one has been activated.
default_runtime = Runtime()
