"""集計ビューサービス。

保存済みPRレコードから、リーダーボード、管理ダッシュボード、
ユーザー×月のPR検索結果を組み立てる読み取り専用クエリを提供する。
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from activity_tracker.models import PullRequest, User
from activity_tracker.schemas.aggregation import (
    DashboardEntry,
    DashboardPR,
    LeaderboardEntry,
    TrackedPR,
    TrackPRsResult,
)
from activity_tracker.services.month_registry import MonthRegistry

logger = logging.getLogger(__name__)


class AggregationService:
    """集計ビューを組み立てるサービスクラス。

    いずれのメソッドも状態を変更しないため、取り込み処理や
    他の集計処理と並行して呼び出してよい。
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # ------------------------------------------------------------------
    # リーダーボード
    # ------------------------------------------------------------------

    async def get_leaderboard(
        self,
        tracked_months: Sequence[str],
    ) -> list[LeaderboardEntry]:
        """ユーザーごとの追跡対象月のPR数を集計する。

        追跡対象外の月に属するPRは数えない。PRが0件のユーザーも含む。
        並び順は PR数の降順、同数の場合は GitHubログイン名の昇順。

        Args:
            tracked_months: 追跡対象の月ラベル。

        Returns:
            リーダーボードエントリのリスト。
        """
        tracked = set(tracked_months)
        users = await self._load_users_with_prs()

        entries = [
            LeaderboardEntry(
                name=user.name,
                github_user=user.github_login,
                pr_count=sum(
                    1 for pr in user.pull_requests if pr.month.name in tracked
                ),
            )
            for user in users
        ]
        entries.sort(key=lambda e: (-e.pr_count, e.github_user))
        return entries

    # ------------------------------------------------------------------
    # 管理ダッシュボード
    # ------------------------------------------------------------------

    async def get_dashboard(
        self,
        tracked_months: Sequence[str],
    ) -> list[DashboardEntry]:
        """ユーザーごとに追跡対象月のPRレコード一覧を返す。

        ユーザーは GitHubログイン名の昇順、PRは ``pr_id`` の昇順。

        Args:
            tracked_months: 追跡対象の月ラベル。

        Returns:
            ダッシュボードエントリのリスト。
        """
        tracked = set(tracked_months)
        users = await self._load_users_with_prs()

        data: list[DashboardEntry] = []
        for user in users:
            prs = sorted(
                (pr for pr in user.pull_requests if pr.month.name in tracked),
                key=lambda pr: pr.pr_id,
            )
            data.append(
                DashboardEntry(
                    name=user.name,
                    github_user=user.github_login,
                    prs=[
                        DashboardPR(
                            id=pr.pr_id,
                            title=pr.title,
                            url=pr.url,
                            status=pr.status,
                            merged=pr.merged,
                            month=pr.month.name,
                            created_at=pr.created_at,
                        )
                        for pr in prs
                    ],
                ),
            )

        return data

    # ------------------------------------------------------------------
    # ユーザー×月のPR検索
    # ------------------------------------------------------------------

    async def track_prs(
        self,
        handles: Sequence[str],
        month_name: str,
    ) -> list[TrackPRsResult]:
        """指定ハンドル群について、指定月のPRを関連名付きで返す。

        ハンドルごとに独立して解決する。未登録のユーザーまたは月は
        ``prs=None`` のエントリとなり、バッチ全体は中断しない。
        結果はリクエストのハンドル順。

        Args:
            handles: GitHubログイン名のリスト。
            month_name: ``YYYY-MM`` 形式の月ラベル。

        Returns:
            ハンドルごとの検索結果リスト。
        """
        month = await MonthRegistry(self.session).get_month(month_name)
        if month is None:
            logger.info("Month %s is not registered", month_name)

        results: list[TrackPRsResult] = []
        for handle in handles:
            user_stmt = select(User).where(User.github_login == handle)
            user_result = await self.session.execute(user_stmt)
            user = user_result.scalar_one_or_none()

            if user is None or month is None:
                results.append(TrackPRsResult(username=handle, prs=None))
                continue

            pr_stmt = (
                select(PullRequest)
                .options(
                    selectinload(PullRequest.org),
                    selectinload(PullRequest.project),
                    selectinload(PullRequest.month),
                )
                .where(
                    PullRequest.user_id == user.user_id,
                    PullRequest.month_id == month.month_id,
                )
                .order_by(PullRequest.pr_id)
            )
            pr_result = await self.session.execute(pr_stmt)
            prs = pr_result.scalars().all()

            results.append(
                TrackPRsResult(
                    username=handle,
                    prs=[
                        TrackedPR(
                            id=pr.pr_id,
                            title=pr.title,
                            url=pr.url,
                            status=pr.status,
                            merged=pr.merged,
                            created=pr.created_at,
                            org=pr.org.name if pr.org else None,
                            project=pr.project.name if pr.project else None,
                            month=pr.month.name,
                        )
                        for pr in prs
                    ],
                ),
            )

        return results

    # ------------------------------------------------------------------
    # Internal Helpers
    # ------------------------------------------------------------------

    async def _load_users_with_prs(self) -> list[User]:
        """全ユーザーを PR と PR の Month を eager load して取得する。"""
        stmt = (
            select(User)
            .options(
                selectinload(User.pull_requests).selectinload(PullRequest.month),
            )
            .order_by(User.github_login)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
