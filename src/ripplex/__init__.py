"""ripplex: fine-grained reactive state with transactional rollback."""

from importlib.metadata import version as _version

__version__ = _version("ripplex")

from ripplex._anchor import Runtime
from ripplex._tracking import get_runtime, isolated
from ripplex.signal import Signal, ReadOnlySignalError, signal, get, set
from ripplex.computed import computed
from ripplex.effect import effect
from ripplex.transaction import Transaction, transaction, transact, action

__all__ = [
    "Signal",
    "ReadOnlySignalError",
    "signal",
    "get",
    "set",
    "computed",
    "effect",
    "Transaction",
    "transaction",
    "transact",
    "action",
    "Runtime",
    "get_runtime",
    "isolated",
]
