"""Nominee domain models.

A nominee is an emergency contact eligible to receive escalation
notifications. Nominee CRUD lives outside the escalation core; the core
only reads the set.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True, eq=True)
class Nominee:
    """An emergency contact.

    Attributes:
        nominee_id: Unique identifier.
        user_id: Owner of the nominee entry.
        name: Display name.
        email: Contact address used by dispatchers.
        relationship: Relationship to the user (e.g. "spouse").
        is_primary: Primary nominees are notified first.
        phone: Optional phone number.
    """

    nominee_id: str
    user_id: str
    name: str
    email: str
    relationship: str
    is_primary: bool = False
    phone: str | None = None

    def __post_init__(self) -> None:
        if not self.nominee_id:
            raise ValueError("nominee_id cannot be empty")
        if not self.user_id:
            raise ValueError("user_id cannot be empty")
        if not self.email:
            raise ValueError("email cannot be empty")


class NomineeSet:
    """Ordered-by-priority collection of a user's nominees.

    Insertion order is kept; ``in_notification_order`` moves primary
    nominees to the front without reordering within each group.
    """

    def __init__(self, nominees: Iterable[Nominee] = ()) -> None:
        self._nominees: tuple[Nominee, ...] = tuple(nominees)

    def __iter__(self) -> Iterator[Nominee]:
        return iter(self._nominees)

    def __len__(self) -> int:
        return len(self._nominees)

    def __bool__(self) -> bool:
        return bool(self._nominees)

    def in_notification_order(self) -> list[Nominee]:
        """Primary nominees first, then the rest."""
        primary = [n for n in self._nominees if n.is_primary]
        others = [n for n in self._nominees if not n.is_primary]
        return primary + others

    @property
    def primary(self) -> list[Nominee]:
        return [n for n in self._nominees if n.is_primary]
