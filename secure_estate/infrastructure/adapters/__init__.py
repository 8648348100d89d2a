"""Production adapters implementing the application ports."""

from secure_estate.infrastructure.adapters.asyncio_record_lock import (
    AsyncioRecordLock,
)
from secure_estate.infrastructure.adapters.role_authorization_policy import (
    RoleAuthorizationPolicy,
)
from secure_estate.infrastructure.adapters.system_time_authority import (
    SystemTimeAuthority,
)
from secure_estate.infrastructure.adapters.webhook_notification_dispatcher import (
    WebhookNotificationDispatcher,
)

__all__: list[str] = [
    "AsyncioRecordLock",
    "RoleAuthorizationPolicy",
    "SystemTimeAuthority",
    "WebhookNotificationDispatcher",
]
