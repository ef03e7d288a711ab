"""PR取り込みサービス。

登録済みユーザーについて、追跡対象月ごとにGitHubからPRを取得し、
Month を解決したうえでPRレコードとして保存するビジネスロジックを提供する。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from activity_tracker.core.exceptions import ExternalAPIError, StorageError
from activity_tracker.external.github_client import GitHubClient, SourcePullRequest
from activity_tracker.models import Month, PullRequest, User
from activity_tracker.services.month_registry import MonthRegistry

logger = logging.getLogger(__name__)


class IngestionService:
    """ベストエフォートのPR取り込みサービス。

    月ごとの処理は互いに独立しており、ある月の取得失敗や保存失敗が
    他の月の取り込みを妨げることはない。
    """

    def __init__(self, session: AsyncSession, client: GitHubClient) -> None:
        """IngestionServiceを初期化する。

        Args:
            session: 非同期データベースセッション。
            client: GitHubClientインスタンス。
        """
        self.session = session
        self.client = client
        self.months = MonthRegistry(session)

    async def ingest(
        self,
        user: User,
        tracked_months: Sequence[str],
    ) -> dict[str, int]:
        """追跡対象月すべてについてユーザーのPRを取り込む。

        1. 月ごとに GitHub から PR を取得（失敗時はその月をスキップ）
        2. Month を解決し、PR を一括 INSERT して月ごとに COMMIT
        3. 保存失敗時はその月のみロールバックして続行

        書き込みを含むトランザクションを GitHub への問い合わせ中に開いたままにしない。

        Args:
            user: 取り込み対象のUserインスタンス。
            tracked_months: 月ラベルの順序付きシーケンス。

        Returns:
            処理に成功した月ラベルをキー、新規保存したPR数を値とする辞書。
            スキップした月は含まれない。
        """
        # rollback 後は user が expire されるため、属性を先に取り出す
        user_id = user.user_id
        login = user.github_login
        persisted: dict[str, int] = {}

        for label in tracked_months:
            try:
                prs = await self.client.search_pull_requests(login, label)
            except ExternalAPIError as e:
                logger.warning(
                    "Skipping %s for user %s: %s",
                    label,
                    login,
                    e.detail,
                )
                continue

            try:
                month = await self.months.resolve_month(label)
                count = await self._insert_pull_requests(user_id, month, prs)
                await self.session.commit()
            except (StorageError, SQLAlchemyError) as e:
                await self.session.rollback()
                logger.error(
                    "Failed to store PRs for user %s in %s: %s",
                    login,
                    label,
                    e,
                )
                continue

            persisted[label] = count
            logger.info(
                "Stored %d of %d PRs for user %s in %s",
                count,
                len(prs),
                login,
                label,
            )

        return persisted

    # ------------------------------------------------------------------
    # Internal Helpers
    # ------------------------------------------------------------------

    async def _insert_pull_requests(
        self,
        user_id: int,
        month: Month,
        prs: Sequence[SourcePullRequest],
    ) -> int:
        """PRの一括INSERTを実行する。

        PostgreSQL ON CONFLICT DO NOTHING を使用し、同一ユーザーの同一URLの
        PRが既に存在する場合はスキップする。

        Returns:
            新規に挿入したPR数。
        """
        if not prs:
            return 0

        stmt = (
            pg_insert(PullRequest)
            .values(build_pull_request_rows(user_id, month, prs))
            .on_conflict_do_nothing(
                index_elements=[PullRequest.user_id, PullRequest.url],
            )
        )
        result = await self.session.execute(stmt)
        return result.rowcount


def build_pull_request_rows(
    user_id: int,
    month: Month,
    prs: Sequence[SourcePullRequest],
) -> list[dict[str, Any]]:
    """正規化済みPRを ``pull_requests`` の行辞書に変換する。

    org_id / project_id は取り込み経路では設定しない。
    """
    return [
        {
            "user_id": user_id,
            "month_id": month.month_id,
            "title": pr.title,
            "url": pr.url,
            "status": pr.status,
            "merged": pr.merged,
        }
        for pr in prs
    ]
