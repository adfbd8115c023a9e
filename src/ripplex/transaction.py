"""Transactions: batched writes with deferred effects and rollback.

Inside a transaction every signal write records the value it replaced, and
effects triggered by those writes are queued instead of run. When the
transaction body returns, the queued effects run in the order they were
queued. When it raises, or when it calls rollback() itself, the recorded
writes are undone newest first, so a signal written several times lands
back on its pre-transaction value.

Transactions nest. Each level has its own cursor into the rollback log and
the effect queue:

- a level that returns runs *its* queued effects immediately, even while
  an enclosing level is still open;
- its writes stay in the log, so an enclosing rollback still undoes them;
- effects that already ran are never undone.
"""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from typing import Callable, Iterator, ParamSpec, TypeVar

from ripplex._anchor import Runtime
from ripplex._tracking import current_runtime

logger = logging.getLogger("ripplex.transaction")

P = ParamSpec("P")
R = TypeVar("R")


class Transaction:
    """Handle for one open transaction level."""

    __slots__ = ("_runtime", "depth", "rolled_back", "_open")

    def __init__(self, runtime: Runtime, depth: int) -> None:
        self._runtime = runtime
        self.depth = depth
        self.rolled_back = False
        self._open = True

    def rollback(self) -> None:
        """Undo every write made at this level (and in finished inner levels).

        Restores re-notify listeners: computed values follow, effects are
        queued again. May be called more than once; each call undoes the
        writes made since the previous one.
        """
        if not self._open:
            raise RuntimeError(f"transaction at depth {self.depth} already finished")
        rt = self._runtime
        if self.depth != rt.transaction_depth:
            raise RuntimeError(
                f"cannot roll back depth {self.depth} while depth {rt.transaction_depth} is open"
            )
        cursor = rt.rollback_cursors[self.depth - 1]
        undone = rt.rollbacks[cursor:]
        del rt.rollbacks[cursor:]
        logger.debug("Rolling back %d write(s) at depth %d", len(undone), self.depth)
        self.rolled_back = True
        # Every restore happens even if a listener raises; the first error is re-raised.
        error = None
        for signal, previous in reversed(undone):
            try:
                signal._write(previous)
            except Exception as exc:
                if error is None:
                    error = exc
        if error is not None:
            raise error

    def __repr__(self) -> str:
        state = "open" if self._open else "closed"
        return f"Transaction(depth={self.depth}, {state})"


def _begin() -> Transaction:
    rt = current_runtime.get()
    rt.transaction_depth += 1
    rt.rollback_cursors.append(len(rt.rollbacks))
    rt.effect_cursors.append(len(rt.effect_queue))
    logger.debug("Transaction opened at depth %d", rt.transaction_depth)
    return Transaction(rt, rt.transaction_depth)


def _run_deferred(tx: Transaction) -> None:
    """Run effects queued at this level, oldest first, including any they queue."""
    rt = tx._runtime
    cursor = rt.effect_cursors[tx.depth - 1]
    index = cursor
    try:
        while index < len(rt.effect_queue):
            rt.effect_queue[index]()
            index += 1
    finally:
        del rt.effect_queue[cursor:]
    logger.debug("Transaction committed at depth %d, ran %d effect(s)", tx.depth, index - cursor)


def _end(tx: Transaction) -> None:
    rt = tx._runtime
    rt.rollback_cursors.pop()
    # Anything still queued at this level (the body raised) is dropped.
    del rt.effect_queue[rt.effect_cursors.pop():]
    rt.transaction_depth -= 1
    if rt.transaction_depth == 0:
        rt.rollbacks.clear()
    tx._open = False


@contextmanager
def transaction() -> Iterator[Transaction]:
    """Context manager for a transaction level.

    Usage:
        with transaction() as tx:
            name.set("foo")
            if not valid():
                tx.rollback()
            # queued effects run here
    """
    tx = _begin()
    try:
        yield tx
    except BaseException as exc:
        tx.rollback()
        logger.debug("Transaction body raised %s, rolled back", type(exc).__name__)
        raise
    else:
        _run_deferred(tx)
    finally:
        _end(tx)


def transact(body: Callable[[Callable[[], None]], R]) -> R:
    """Run body(rollback) as a transaction and return its result.

    body may call rollback() to abort without raising. If body raises, its
    writes are rolled back and the exception propagates unchanged.

    Usage:
        name = signal("dan")

        def rename(rollback):
            set(name, "foo")
            rollback()

        transact(rename)
        get(name)  # "dan"
    """
    with transaction() as tx:
        return body(tx.rollback)


def action(fn: Callable[P, R]) -> Callable[P, R]:
    """Decorator: run fn inside a transaction.

    Usage:
        first = signal("Alice")
        last = signal("Smith")

        @action
        def rename(f, l):
            set(first, f)
            set(last, l)
            # effects run once the function returns; an exception undoes both writes
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        with transaction():
            return fn(*args, **kwargs)

    return wrapper
