"""Signals: observable cells that notify their listeners on write.

A Signal is a value slot plus the callbacks to invoke when it changes.
Dependency edges are nothing more than those callbacks: a computed's
recompute function or an effect's scheduler sitting in a dependency's
listener set. Listeners are never removed.

Reads go through the tracking engine so that a computed or effect under
construction learns what it depends on. Writes inside a transaction record
the previous value so the transaction can undo them.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from ripplex._tracking import current_runtime, track

T = TypeVar("T")

Listener = Callable[[T], None]


class ReadOnlySignalError(TypeError):
    """Raised when code outside the engine writes to a computed signal."""


class Signal(Generic[T]):
    """A single observable value."""

    __slots__ = ("value", "writeable", "listeners")

    def __init__(self, value: T, writeable: bool = True) -> None:
        self.value = value
        self.writeable = writeable
        # dict as an insertion-ordered set
        self.listeners: dict[Listener[T], None] = {}

    def get(self) -> T:
        """Read the value. Inside a tracking window, records the dependency."""
        return track(self)

    def set(self, value: T) -> None:
        """Write a new value and notify every listener.

        Raises ReadOnlySignalError for computed signals.
        """
        if not self.writeable:
            raise ReadOnlySignalError(f"cannot write to read-only {self!r}")
        rt = current_runtime.get()
        if rt.transaction_depth > 0:
            rt.rollbacks.append((self, self.value))
        self._write(value)

    def subscribe(self, listener: Listener[T]) -> None:
        """Add a listener. Adding the same callable twice is a no-op."""
        self.listeners[listener] = None

    def _write(self, value: T) -> None:
        """Overwrite and notify without checks or rollback bookkeeping."""
        self.value = value
        self._notify()

    def _notify(self) -> None:
        # Snapshot: listeners added during this notification wait for the next write.
        value = self.value
        for listener in list(self.listeners):
            listener(value)

    def __repr__(self) -> str:
        kind = "Signal" if self.writeable else "ReadonlySignal"
        return f"{kind}({self.value!r})"


def signal(initial: T) -> Signal[T]:
    """Create a writable signal.

    Usage:
        count = signal(0)
        set(count, 3)
        get(count)  # 3
    """
    return Signal(initial)


def get(cell: Signal[T]) -> T:
    """Read a signal, registering it as a dependency when tracking."""
    return cell.get()


def set(cell: Signal[T], value: T) -> None:
    """Write a signal. Fails with ReadOnlySignalError on computed signals."""
    cell.set(value)
