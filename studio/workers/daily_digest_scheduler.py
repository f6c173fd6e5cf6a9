from __future__ import annotations

import logging
import time
from datetime import date, datetime, timezone
from typing import Callable, Optional

import httpx

from studio.core.config import Settings, get_settings
from studio.core.db import session_scope
from studio.core.observability import correlation_context, new_correlation_id
from studio.services import DailyDigestService, DigestResult
from studio.services import exceptions as service_exceptions

logger = logging.getLogger("studio.daily_digest_scheduler")


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class DailyDigestScheduler:
    """Fires the scheduled daily digest once per UTC day at the configured time."""

    POLL_INTERVAL_SECONDS = 30.0

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = _utc_now,
        sleep: Callable[[float], None] = time.sleep,
        transport: httpx.BaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self.clock = clock
        self.sleep = sleep
        self.transport = transport
        self.last_run_date: Optional[date] = None

    def run_forever(self) -> None:
        logger.info(
            "Daily digest scheduler started, firing at %02d:%02d UTC",
            self.settings.DAILY_DIGEST_HOUR_UTC,
            self.settings.DAILY_DIGEST_MINUTE_UTC,
        )
        while True:
            self.run_once()
            self.sleep(self.POLL_INTERVAL_SECONDS)

    def is_due(self, now: datetime) -> bool:
        if self.last_run_date == now.date():
            return False
        fire_at = now.replace(
            hour=self.settings.DAILY_DIGEST_HOUR_UTC,
            minute=self.settings.DAILY_DIGEST_MINUTE_UTC,
            second=0,
            microsecond=0,
        )
        return now >= fire_at

    def run_once(self) -> Optional[DigestResult]:
        now = self.clock().astimezone(timezone.utc)
        if not self.is_due(now):
            return None

        target_date = now.date()
        # Marked before sending so a failing digest is not retried every poll.
        self.last_run_date = target_date
        with correlation_context(new_correlation_id("digest")):
            try:
                with session_scope() as session:
                    service = DailyDigestService(
                        session,
                        settings=self.settings,
                        transport=self.transport,
                        sleep=self.sleep,
                    )
                    result = service.send_digest(target_date=target_date, manual=False)
            except service_exceptions.ServiceError as exc:
                logger.error("Scheduled digest for %s failed: %s", target_date, exc)
                return None
            except Exception:
                logger.exception("Scheduled digest for %s failed unexpectedly", target_date)
                return None
        logger.info("Scheduled digest for %s sent: %s", target_date, result.message)
        return result
