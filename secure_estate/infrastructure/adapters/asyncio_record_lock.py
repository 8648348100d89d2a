"""In-process per-user lock built on asyncio.Lock.

Serializes evaluation and confirmation for the same user within one
process. Deployments running several API/worker processes against the
same database rely on the repository's optimistic concurrency as the
cross-process guard; a lost race abandons the tick.

Locks are created on first use and dropped once no task holds or waits
for them, so the registry only grows with concurrently active users.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog

from secure_estate.application.ports.record_lock import RecordLockProtocol

logger = structlog.get_logger()

DEFAULT_LOCK_TIMEOUT_SECONDS: float = 5.0


class AsyncioRecordLock(RecordLockProtocol):
    """Per-user asyncio lock registry.

    Attributes:
        _timeout: Seconds to wait for a lock before raising TimeoutError.
        _locks: user_id -> lock.
        _users: user_id -> number of tasks holding or waiting.
    """

    def __init__(self, timeout_seconds: float = DEFAULT_LOCK_TIMEOUT_SECONDS) -> None:
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")
        self._timeout = timeout_seconds
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, user_id: str) -> AsyncIterator[None]:
        """Hold ``user_id``'s lock for the duration of the block.

        Raises:
            TimeoutError: If the lock is not acquired within the timeout.
        """
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._users[user_id] = self._users.get(user_id, 0) + 1
        try:
            try:
                await asyncio.wait_for(lock.acquire(), timeout=self._timeout)
            except TimeoutError:
                logger.warning(
                    "record_lock_timeout",
                    user_id=user_id,
                    timeout_seconds=self._timeout,
                )
                raise
            try:
                yield
            finally:
                lock.release()
        finally:
            self._users[user_id] -= 1
            if self._users[user_id] == 0:
                del self._users[user_id]
                self._locks.pop(user_id, None)

    def is_locked(self, user_id: str) -> bool:
        """Whether some task currently holds ``user_id``'s lock."""
        lock = self._locks.get(user_id)
        return lock is not None and lock.locked()

    @property
    def tracked_users(self) -> int:
        """Users with a live lock entry (held or awaited)."""
        return len(self._locks)
