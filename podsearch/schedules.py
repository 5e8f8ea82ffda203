from __future__ import annotations

from datetime import timedelta


SCHEDULE = {
    "search_refresh": {"task": "tasks.search_refresh", "interval": timedelta(hours=6)},
}


def beat_schedule() -> dict:
    return {name: {"task": e["task"], "schedule": e["interval"]} for name, e in SCHEDULE.items()}
