"""
Usage dashboard monitor.

Background task that re-projects usage info on a fixed interval and keeps
the latest snapshot for the dashboard endpoint. Each poll is independent;
transient store errors are retried with exponential backoff and a failed
poll leaves the previous snapshot in place.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from labtrack.application.use_cases.get_usage_info import GetUsageInfoUseCase
from labtrack.config import get_logger, get_settings
from labtrack.core.entities.machine import PartStatus
from labtrack.core.entities.usage import UsageInfo
from labtrack.core.exceptions import TransientStoreError

logger = get_logger(__name__)


@dataclass
class UsageSnapshot:
    """One projection of every installed part."""

    records: list[UsageInfo] = field(default_factory=list)
    refreshed_at: datetime | None = None

    @property
    def warning_count(self) -> int:
        return sum(1 for r in self.records if r.status == PartStatus.WARNING)

    @property
    def critical_count(self) -> int:
        return sum(1 for r in self.records if r.status == PartStatus.CRITICAL)


class UsageDashboardMonitor:
    """Polls GetUsageInfoUseCase every ``interval`` seconds."""

    def __init__(
        self,
        use_case: GetUsageInfoUseCase | None = None,
        interval: float | None = None,
    ):
        settings = get_settings()
        self._use_case = use_case or GetUsageInfoUseCase()
        self._interval = interval if interval is not None else settings.monitor.poll_interval_seconds
        self._snapshot = UsageSnapshot()
        self._task: asyncio.Task | None = None
        self._running = False

    @property
    def snapshot(self) -> UsageSnapshot:
        return self._snapshot

    @property
    def running(self) -> bool:
        return self._running

    def _get_retry_decorator(self) -> Any:
        """Get tenacity retry decorator with current settings."""
        settings = get_settings()
        return retry(
            stop=stop_after_attempt(settings.monitor.max_retries),
            wait=wait_exponential(
                multiplier=settings.monitor.retry_delay,
                min=settings.monitor.retry_delay,
                max=settings.monitor.retry_delay * (settings.monitor.retry_multiplier**3),
            ),
            retry=retry_if_exception_type(TransientStoreError),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "usage_monitor_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def refresh(self) -> UsageSnapshot:
        """Take one snapshot now, retrying transient failures."""
        project: Callable[[], Awaitable[list[UsageInfo]]] = self._get_retry_decorator()(
            self._use_case.execute
        )
        records = await project()
        self._snapshot = UsageSnapshot(records=records, refreshed_at=datetime.utcnow())
        logger.info(
            "usage_snapshot_refreshed",
            parts=len(records),
            warning=self._snapshot.warning_count,
            critical=self._snapshot.critical_count,
        )
        return self._snapshot

    async def start(self) -> None:
        if self._task is not None:
            return
        self._running = True
        self._task = asyncio.create_task(self._poll_loop())
        logger.info("usage_monitor_started", interval=self._interval)

    async def stop(self) -> None:
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("usage_monitor_stopped")

    async def _poll_loop(self) -> None:
        while self._running:
            try:
                await self.refresh()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("usage_monitor_poll_failed", error=str(e))
            await asyncio.sleep(self._interval)


# Global monitor instance
_monitor: UsageDashboardMonitor | None = None


def get_usage_monitor() -> UsageDashboardMonitor:
    """Get or create the global usage monitor."""
    global _monitor
    if _monitor is None:
        _monitor = UsageDashboardMonitor()
    return _monitor


def reset_usage_monitor() -> None:
    """Drop the global monitor (for testing)."""
    global _monitor
    _monitor = None
