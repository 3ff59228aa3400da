"""
Error tracking and tracing with sentry-sdk.

Telemetry is an explicit handle: the API lifespan creates one from
settings, starts it once and hands it to request handlers through a
dependency. Nothing here runs at import time.
"""

import sentry_sdk
import structlog
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from matchday.config.settings import AppSettings, TelemetrySettings
from matchday.models.user import User

logger = structlog.get_logger(__name__)


class Telemetry:
    """
    Handle for the process-wide telemetry client.

    Usage:
        telemetry = Telemetry(settings.telemetry, settings.app)
        telemetry.start()
        telemetry.identify(user)
        telemetry.shutdown()
    """

    def __init__(self, settings: TelemetrySettings, app_settings: AppSettings) -> None:
        self.settings = settings
        self.app_settings = app_settings
        self._started = False

    @property
    def enabled(self) -> bool:
        return self.settings.dsn is not None

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        """Initialize sentry-sdk. Does nothing without a DSN or when already started."""
        if self._started:
            return
        if not self.enabled:
            logger.info("Telemetry disabled, no DSN configured")
            return

        sentry_sdk.init(
            dsn=self.settings.dsn,
            server_name=self.settings.role_name,
            environment=self.app_settings.environment,
            release=self.app_settings.version,
            traces_sample_rate=self.settings.traces_sample_rate,
            send_default_pii=False,
            integrations=[StarletteIntegration(), FastApiIntegration()],
        )
        self._started = True
        logger.info(
            "Telemetry started",
            role_name=self.settings.role_name,
            environment=self.app_settings.environment,
        )

    def identify(self, user: User) -> None:
        """Tag events of the current request scope with the authenticated user."""
        if not self._started:
            return
        sentry_sdk.set_user({"id": str(user.id), "username": user.username})

    def shutdown(self, timeout: float = 2.0) -> None:
        """Flush pending events."""
        if not self._started:
            return
        sentry_sdk.flush(timeout=timeout)
        self._started = False
        logger.info("Telemetry stopped")
