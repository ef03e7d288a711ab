"""集計ビューエンドポイント。

リーダーボード、管理ダッシュボード、ユーザー×月のPR検索のAPIを提供する。
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from activity_tracker.api.deps import get_session, get_tracked_months
from activity_tracker.schemas.aggregation import (
    DashboardEntry,
    LeaderboardEntry,
    TrackPRsRequest,
    TrackPRsResult,
)
from activity_tracker.services.aggregation_service import AggregationService

router = APIRouter()


# ---------------------------------------------------------------------------
# リーダーボード
# ---------------------------------------------------------------------------


@router.get(
    "/leaderboard",
    response_model=list[LeaderboardEntry],
    summary="リーダーボード",
)
async def get_leaderboard(
    session: AsyncSession = Depends(get_session),
    tracked_months: list[str] = Depends(get_tracked_months),
) -> list[LeaderboardEntry]:
    """追跡対象月のPR数をユーザーごとに返す。

    Args:
        session: データベースセッション。
        tracked_months: 追跡対象の月ラベル。

    Returns:
        リーダーボードエントリのリスト。
    """
    service = AggregationService(session)
    return await service.get_leaderboard(tracked_months)


# ---------------------------------------------------------------------------
# 管理ダッシュボード
# ---------------------------------------------------------------------------


@router.get(
    "/admin-dashboard",
    response_model=list[DashboardEntry],
    summary="管理ダッシュボード",
)
async def get_admin_dashboard(
    session: AsyncSession = Depends(get_session),
    tracked_months: list[str] = Depends(get_tracked_months),
) -> list[DashboardEntry]:
    """追跡対象月のPRレコード一覧をユーザーごとに返す。

    Args:
        session: データベースセッション。
        tracked_months: 追跡対象の月ラベル。

    Returns:
        ダッシュボードエントリのリスト。
    """
    service = AggregationService(session)
    return await service.get_dashboard(tracked_months)


# ---------------------------------------------------------------------------
# ユーザー×月のPR検索
# ---------------------------------------------------------------------------


@router.post(
    "/track-prs",
    response_model=list[TrackPRsResult],
    summary="ユーザー×月のPR検索",
)
async def track_prs(
    request: TrackPRsRequest,
    session: AsyncSession = Depends(get_session),
) -> list[TrackPRsResult]:
    """指定ハンドル群の指定月のPRを返す。

    未登録のユーザーまたは月に対しては ``prs`` が null のエントリを返す。

    Args:
        request: PR検索リクエスト。
        session: データベースセッション。

    Returns:
        ハンドルごとの検索結果リスト。
    """
    service = AggregationService(session)
    return await service.track_prs(request.usernames, request.month_name)
