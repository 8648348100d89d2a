"""Clock port for the check-in lifecycle.

Every due-by window, alert and audit timestamp is derived from this
port; no service reads the wall clock itself. Tests substitute
FakeTimeAuthority and step it forward one window at a time.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Source of "now" for the escalation core.

    Implementations:
        SystemTimeAuthority (secure_estate/infrastructure/adapters/)
        FakeTimeAuthority (tests/helpers/fake_time_authority.py)
    """

    @abstractmethod
    def now(self) -> datetime:
        """Current instant, timezone-aware.

        Compared against ``last_check_in`` and stored in audit rows, so
        it must be in the same zone as persisted records (UTC).
        """
        ...

    @abstractmethod
    def utcnow(self) -> datetime:
        """Current instant in UTC (timezone-aware)."""
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Seconds on a clock that never goes backwards.

        For measuring durations such as sweep runtime; the origin is
        arbitrary.
        """
        ...
