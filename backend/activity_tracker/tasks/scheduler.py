"""APSchedulerの設定と管理。

定期実行タスクのスケジュール登録を行う。
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from activity_tracker.config import settings

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


def setup_jobs() -> None:
    """スケジューラにジョブを登録する。

    - refresh_all_users_job: REFRESH_INTERVAL_HOURS ごとに実行（デフォルト6時間）
    """
    from activity_tracker.tasks.ingestion import refresh_all_users_job

    scheduler.add_job(
        refresh_all_users_job,
        trigger=IntervalTrigger(hours=settings.REFRESH_INTERVAL_HOURS),
        id="refresh_all_users_job",
        name="GitHub PR Refresh",
        replace_existing=True,
        max_instances=1,
    )
    logger.info(
        "Registered refresh_all_users_job: every %d hours",
        settings.REFRESH_INTERVAL_HOURS,
    )
