"""PR取り込みバックグラウンドタスク。

ユーザー登録時に BackgroundTasks から呼ばれる単一ユーザーの取り込みと、
APSchedulerから呼ばれる全ユーザーの定期再取り込みを提供する。
"""

from __future__ import annotations

import logging

from sqlalchemy import select

from activity_tracker.config import settings
from activity_tracker.database import async_session_factory
from activity_tracker.external.github_client import GitHubClient
from activity_tracker.models import User
from activity_tracker.services.ingestion_service import IngestionService

logger = logging.getLogger(__name__)


async def ingest_user_job(user_id: int) -> None:
    """指定ユーザーのPRを追跡対象月すべてについて取り込む。

    リクエストとは独立したセッションを使用し、COMMIT は月ごとに
    IngestionService が行う。例外は呼び出し元（BackgroundTasks）へ
    伝播させず、ログに記録するのみとする。

    Args:
        user_id: 取り込み対象のユーザーID。
    """
    logger.info("Starting ingestion job for user_id=%d", user_id)

    async with async_session_factory() as session:
        try:
            stmt = select(User).where(User.user_id == user_id)
            result = await session.execute(stmt)
            user = result.scalar_one_or_none()

            if user is None:
                logger.error("User not found: user_id=%d", user_id)
                return

            login = user.github_login
            async with GitHubClient() as client:
                service = IngestionService(session=session, client=client)
                persisted = await service.ingest(user, settings.TRACKED_MONTHS)

            logger.info(
                "Ingestion job completed for user %s: %s",
                login,
                persisted,
            )

        except Exception:
            await session.rollback()
            logger.exception("Ingestion job failed for user_id=%d", user_id)


async def refresh_all_users_job() -> None:
    """APSchedulerから呼ばれる定期再取り込みジョブ。

    全ユーザーについて追跡対象月のPRを再取得する。保存済みのPRは
    ``(user_id, url)`` の一意制約によりスキップされる。
    ユーザーごとに独立したセッションで処理し、あるユーザーの失敗は
    他のユーザーに影響しない。
    """
    logger.info("Starting scheduled PR refresh job")

    async with async_session_factory() as session:
        stmt = select(User.user_id).order_by(User.github_login)
        result = await session.execute(stmt)
        user_ids = list(result.scalars().all())

    if not user_ids:
        logger.info("No registered users. Skipping refresh.")
        return

    for user_id in user_ids:
        await ingest_user_job(user_id)

    logger.info("Scheduled PR refresh job completed for %d users", len(user_ids))
