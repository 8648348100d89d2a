"""Record lock port - per-user mutual exclusion.

Evaluation and confirmation for the same user must never interleave:
the engine's decision depends on the persisted counter, and concurrent
read-evaluate-persist sequences could double-increment or double-escalate.
Different users never contend.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol, runtime_checkable


@runtime_checkable
class RecordLockProtocol(Protocol):
    """Abstract interface for per-user locking.

    Usage:
        async with record_lock.hold(user_id):
            record = await repository.load_record(user_id)
            ...
            await repository.save_record(updated)
    """

    def hold(self, user_id: str) -> AbstractAsyncContextManager[None]:
        """Return an async context manager holding the user's lock.

        Raises:
            TimeoutError: If the lock cannot be acquired within the
                implementation's bound.
        """
        ...
