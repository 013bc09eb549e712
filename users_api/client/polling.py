"""APScheduler jobs keeping API health and user list refreshed on fixed intervals."""

import structlog
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from users_api.client.manager import UserManager
from users_api.config import Settings

logger = structlog.get_logger(__name__)


def start_polling(manager: UserManager, settings: Settings) -> BackgroundScheduler:
    """Start health and list polling; jobs are independent of user actions."""
    scheduler = BackgroundScheduler()

    scheduler.add_job(
        manager.check_api_status,
        trigger=IntervalTrigger(seconds=settings.HEALTH_POLL_SECONDS),
        id="api_health",
        name="API health check",
        replace_existing=True,
    )

    scheduler.add_job(
        manager.load_users,
        trigger=IntervalTrigger(seconds=settings.USERS_POLL_SECONDS),
        id="users_refresh",
        name="Users list refresh",
        replace_existing=True,
    )

    scheduler.start()
    logger.info(
        "Polling started",
        health_every_s=settings.HEALTH_POLL_SECONDS,
        users_every_s=settings.USERS_POLL_SECONDS,
    )
    return scheduler


def stop_polling(scheduler: BackgroundScheduler) -> None:
    """Stop the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Polling stopped")
