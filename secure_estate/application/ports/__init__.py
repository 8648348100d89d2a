"""Application ports - abstract interfaces for infrastructure adapters."""

from secure_estate.application.ports.authorization_policy import (
    AuthorizationPolicyProtocol,
)
from secure_estate.application.ports.nominee_repository import (
    NomineeRepositoryProtocol,
)
from secure_estate.application.ports.notification_dispatcher import (
    NotificationDispatcherProtocol,
)
from secure_estate.application.ports.record_lock import RecordLockProtocol
from secure_estate.application.ports.time_authority import TimeAuthorityProtocol
from secure_estate.application.ports.user_account_repository import (
    UserAccountRepositoryProtocol,
)
from secure_estate.application.ports.wellbeing_repository import (
    WellbeingRepositoryProtocol,
)

__all__: list[str] = [
    "AuthorizationPolicyProtocol",
    "NomineeRepositoryProtocol",
    "NotificationDispatcherProtocol",
    "RecordLockProtocol",
    "TimeAuthorityProtocol",
    "UserAccountRepositoryProtocol",
    "WellbeingRepositoryProtocol",
]
