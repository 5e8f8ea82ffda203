from __future__ import annotations

import os

from celery import Celery

from podsearch.schedules import beat_schedule

celery_app = Celery(
    "podsearch",
    broker=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
    backend=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
    include=["tasks"],
)

celery_app.conf.task_routes = {
    "tasks.search_refresh": {"queue": "search"},
}
celery_app.conf.beat_schedule = beat_schedule()
