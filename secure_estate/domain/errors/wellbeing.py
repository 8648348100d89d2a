"""Well-being escalation domain errors.

This module provides exception classes for the check-in / alert /
escalation lifecycle. Only InvalidConfigurationError and
WellbeingRecordNotFoundError reach end users; the others are operator
signals that the engine and services handle without aborting a sweep.
"""

from __future__ import annotations

from datetime import datetime

from secure_estate.domain.exceptions import SecureEstateError


class InvalidConfigurationError(SecureEstateError):
    """Raised when a check-in interval or alert ceiling is out of range.

    Raised before any mutation, so the stored record is untouched.

    Attributes:
        field: Name of the rejected setting.
        value: The rejected value.
    """

    def __init__(self, field: str, value: object, reason: str) -> None:
        """Initialize the error.

        Args:
            field: Name of the rejected setting.
            value: The rejected value.
            reason: Why the value was rejected.
        """
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}={value!r}: {reason}")


class ClockSkewError(SecureEstateError):
    """Evaluation time precedes the record's last check-in.

    Not raised: the engine builds one for a skewed tick, logs its fields
    and message with the ``clock_skew_detected`` warning, and returns a
    no-op decision flagged ``clock_skew``.

    Attributes:
        user_id: Owner of the record.
        now: The evaluation time supplied.
        last_check_in: The stored last check-in time.
    """

    def __init__(self, user_id: str, now: datetime, last_check_in: datetime) -> None:
        self.user_id = user_id
        self.now = now
        self.last_check_in = last_check_in
        super().__init__(
            f"Clock skew for user {user_id}: now={now.isoformat()} is before "
            f"last_check_in={last_check_in.isoformat()}"
        )


class PersistenceConflictError(SecureEstateError):
    """Raised when a save loses an optimistic-concurrency race.

    The caller abandons the tick; the next scheduler pass re-evaluates
    from the then-current persisted state.

    Attributes:
        user_id: Owner of the record.
        expected_version: Version the writer read.
        actual_version: Version found in storage (None if unknown).
    """

    def __init__(
        self,
        user_id: str,
        expected_version: int,
        actual_version: int | None = None,
    ) -> None:
        self.user_id = user_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        actual = "unknown" if actual_version is None else str(actual_version)
        super().__init__(
            f"Concurrent modification of wellbeing record for user {user_id}: "
            f"expected version {expected_version}, found {actual}"
        )


class WellbeingRecordNotFoundError(SecureEstateError):
    """Raised when no well-being record exists for a user.

    Attributes:
        user_id: The user that was looked up.
    """

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"No wellbeing record for user {user_id}")


class DeliveryFailureError(SecureEstateError):
    """Raised by dispatcher adapters when a notification cannot be delivered.

    Services convert this into a failed audit entry; it never reverses
    the state transition that triggered the notification.

    Attributes:
        recipient: Nominee id or user id the message was addressed to.
        reason: Transport-level failure description.
    """

    def __init__(self, recipient: str, reason: str) -> None:
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"Delivery to {recipient} failed: {reason}")
