"""
app/scheduler/jobs.py

APScheduler-based background jobs for the directory service.

Schedule
--------
  business_cache_cleanup: every ``BUSINESS_CACHE_CLEANUP_INTERVAL_SECONDS``
                          (default 300) evicts expired business cache entries

Lifecycle
---------
Call ``build_scheduler(cache)`` once to get a configured ``BackgroundScheduler``.
Start it on app boot; shut it down gracefully on app shutdown.
The scheduler is wired into FastAPI via the ``lifespan`` context in main.py.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from app.cache.business_cache import BusinessCache
from app.config import get_business_cache_settings

logger = logging.getLogger(__name__)

CACHE_CLEANUP_JOB_ID = "business_cache_cleanup"


# ---------------------------------------------------------------------------
# Job: Business cache sweep
# ---------------------------------------------------------------------------


def run_cache_cleanup(cache: BusinessCache) -> int:
    """
    Evict expired entries. Never raises; a failed sweep is retried next tick.
    """
    try:
        evicted = cache.cleanup()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Scheduler: business_cache_cleanup failed: %s", exc)
        return 0
    if evicted:
        logger.info("Scheduler: business_cache_cleanup evicted=%s", evicted)
    return evicted


# ---------------------------------------------------------------------------
# Scheduler factory
# ---------------------------------------------------------------------------


def build_scheduler(
    cache: BusinessCache,
    *,
    interval_seconds: int | None = None,
) -> BackgroundScheduler:
    """
    Build and register all periodic jobs.

    Returns a configured but *not yet started* ``BackgroundScheduler``.
    The caller must call ``.start()`` and ``.shutdown(wait=True)`` at the
    appropriate lifecycle points.
    """
    if interval_seconds is None:
        interval_seconds = get_business_cache_settings().cleanup_interval_seconds

    scheduler = BackgroundScheduler(timezone="UTC")

    scheduler.add_job(
        run_cache_cleanup,
        trigger="interval",
        seconds=max(1, interval_seconds),
        args=[cache],
        id=CACHE_CLEANUP_JOB_ID,
        name="Business cache cleanup",
        replace_existing=True,
        misfire_grace_time=60,
        coalesce=True,
    )

    return scheduler
