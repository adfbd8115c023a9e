"""Effects: callbacks re-run for their side effects when dependencies change.

An effect runs once immediately to discover its dependencies. After that,
every write to one of them either runs the callback on the spot or, inside
a transaction, queues it until the transaction level finishes. Queued runs
are not de-duplicated: two writes inside a transaction mean two runs.
"""

from __future__ import annotations

from typing import Callable

from ripplex._tracking import capture, current_runtime

Callback = Callable[[], None]


def effect(callback: Callback) -> Callback:
    """Run callback now and again after every write to a signal it read.

    Returns callback unchanged, so this also works as a decorator.

    Usage:
        count = signal(0)
        log = []
        effect(lambda: log.append(get(count)))
        # log == [0]
        set(count, 3)
        # log == [0, 3]
    """
    _, dependencies = capture(callback)

    def scheduled(_value: object) -> None:
        rt = current_runtime.get()
        if rt.transaction_depth > 0:
            rt.effect_queue.append(callback)
        else:
            callback()

    for dependency in dependencies:
        dependency.subscribe(scheduled)

    return callback
