"""Bootstrap wiring for the well-being escalation core.

Chooses adapters from WellbeingConfig:

    DATABASE_URL set          -> PostgreSQL repositories
    DATABASE_URL unset        -> in-memory stubs
    NOTIFICATION_WEBHOOK_URL  -> webhook dispatcher, else the stub

Production refuses to start on stubs: a silent in-memory store or a
dispatcher that drops emergency notifications is worse than no service.
"""

from __future__ import annotations

from dataclasses import dataclass

from structlog import get_logger

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
from secure_estate.application.services.admin_monitoring_service import (
    AdminMonitoringService,
)
from secure_estate.application.services.escalation_sweep_service import (
    EscalationSweepService,
)
from secure_estate.application.services.wellbeing_service import WellbeingService
from secure_estate.bootstrap.database import close_database_engine, get_session_factory
from secure_estate.config.wellbeing_config import WellbeingConfig
from secure_estate.infrastructure.adapters.asyncio_record_lock import AsyncioRecordLock
from secure_estate.infrastructure.adapters.persistence import (
    PostgresNomineeRepository,
    PostgresUserAccountRepository,
    PostgresWellbeingRepository,
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
from secure_estate.infrastructure.stubs import (
    NomineeRepositoryStub,
    NotificationDispatcherStub,
    UserAccountRepositoryStub,
    WellbeingRepositoryStub,
)

logger = get_logger()


@dataclass
class WellbeingComponents:
    """Everything the API and the sweep worker need, wired once."""

    config: WellbeingConfig
    repository: WellbeingRepositoryProtocol
    nominee_repository: NomineeRepositoryProtocol
    user_repository: UserAccountRepositoryProtocol
    dispatcher: NotificationDispatcherProtocol
    record_lock: RecordLockProtocol
    time_authority: TimeAuthorityProtocol
    authorization_policy: AuthorizationPolicyProtocol
    wellbeing_service: WellbeingService
    sweep_service: EscalationSweepService
    admin_service: AdminMonitoringService

    async def aclose(self) -> None:
        """Release network resources held by the adapters."""
        if isinstance(self.dispatcher, WebhookNotificationDispatcher):
            await self.dispatcher.aclose()
        if self.config.database_url:
            await close_database_engine()


def build_wellbeing_components(
    config: WellbeingConfig,
    time_authority: TimeAuthorityProtocol | None = None,
) -> WellbeingComponents:
    """Wire repositories, dispatcher and services for ``config``.

    Raises:
        ValueError: If production is configured without a database or a
            notification webhook.
    """
    log = logger.bind(component="wellbeing_bootstrap", environment=config.environment)

    if config.is_production:
        missing = [
            name
            for name, value in (
                ("DATABASE_URL", config.database_url),
                ("NOTIFICATION_WEBHOOK_URL", config.notification_webhook_url),
            )
            if not value
        ]
        if missing:
            raise ValueError(
                f"Production requires {', '.join(missing)}; refusing to start on stubs"
            )

    repository: WellbeingRepositoryProtocol
    nominee_repository: NomineeRepositoryProtocol
    user_repository: UserAccountRepositoryProtocol
    if config.database_url:
        session_factory = get_session_factory(config.database_url)
        repository = PostgresWellbeingRepository(
            session_factory,
            statement_timeout_seconds=config.persistence_timeout_seconds,
        )
        nominee_repository = PostgresNomineeRepository(session_factory)
        user_repository = PostgresUserAccountRepository(session_factory)
    else:
        repository = WellbeingRepositoryStub()
        nominee_repository = NomineeRepositoryStub()
        user_repository = UserAccountRepositoryStub()

    dispatcher: NotificationDispatcherProtocol
    if config.notification_webhook_url:
        dispatcher = WebhookNotificationDispatcher(
            config.notification_webhook_url,
            timeout_seconds=config.dispatch_timeout_seconds,
        )
    else:
        dispatcher = NotificationDispatcherStub()

    clock = time_authority or SystemTimeAuthority()
    record_lock = AsyncioRecordLock(timeout_seconds=config.persistence_timeout_seconds)
    policy = RoleAuthorizationPolicy(user_repository)

    wellbeing_service = WellbeingService(
        repository=repository,
        nominee_repository=nominee_repository,
        dispatcher=dispatcher,
        record_lock=record_lock,
        time_authority=clock,
        default_interval_hours=config.default_interval_hours,
        default_alert_ceiling=config.default_alert_ceiling,
        dispatch_timeout_seconds=config.dispatch_timeout_seconds,
    )
    sweep_service = EscalationSweepService(
        wellbeing_service=wellbeing_service,
        repository=repository,
        time_authority=clock,
        concurrency=config.sweep_concurrency,
    )
    admin_service = AdminMonitoringService(repository, policy)

    log.info(
        "wellbeing_components_built",
        repository=type(repository).__name__,
        dispatcher=type(dispatcher).__name__,
        sweep_enabled=config.sweep_enabled,
    )

    return WellbeingComponents(
        config=config,
        repository=repository,
        nominee_repository=nominee_repository,
        user_repository=user_repository,
        dispatcher=dispatcher,
        record_lock=record_lock,
        time_authority=clock,
        authorization_policy=policy,
        wellbeing_service=wellbeing_service,
        sweep_service=sweep_service,
        admin_service=admin_service,
    )


_components: WellbeingComponents | None = None


def get_wellbeing_components() -> WellbeingComponents:
    """Get the process-wide components, building them from the environment."""
    global _components
    if _components is None:
        _components = build_wellbeing_components(WellbeingConfig.from_environment())
    return _components


def set_wellbeing_components(components: WellbeingComponents | None) -> None:
    """Set custom components for testing."""
    global _components
    _components = components


def reset_wellbeing_components() -> None:
    """Reset the singleton for testing."""
    global _components
    _components = None
