from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging as celery_setup_logging

from fantasy_league.config import get_settings
from fantasy_league.logging_config import setup_logging

settings = get_settings()

celery_app = Celery(
    "fantasy_league_tasks",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["fantasy_league.tasks.sync_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
)

if settings.sync_enabled:
    celery_app.conf.beat_schedule = {
        # Fixtures and player stats change every matchday
        "sync-weekly-monday": {
            "task": "fantasy_league.tasks.sync_tasks.sync_weekly",
            "schedule": crontab(minute=0, hour=3, day_of_week="mon"),
        },
        # Leagues, seasons and clubs change between seasons
        "sync-semi-annual": {
            "task": "fantasy_league.tasks.sync_tasks.sync_semi_annual",
            "schedule": crontab(minute=0, hour=2, day_of_month=1, month_of_year="1,7"),
        },
    }
else:
    celery_app.conf.beat_schedule = {}


@celery_setup_logging.connect
def configure_worker_logging(**kwargs):
    setup_logging(level=settings.log_level, access_log=False)
