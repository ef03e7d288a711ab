"""ユーザーエンドポイント。

ユーザー登録と、PR取り込みの再実行APIを提供する。
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from activity_tracker.api.deps import get_session, get_tracked_months
from activity_tracker.core.exceptions import NotFoundError
from activity_tracker.schemas.user import (
    SyncScheduledResponse,
    UserCreateRequest,
    UserResponse,
)
from activity_tracker.services.user_service import get_user_by_login, register_user
from activity_tracker.tasks.ingestion import ingest_user_job

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=UserResponse,
    status_code=201,
    summary="ユーザー登録",
)
async def create_user(
    request: UserCreateRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
) -> UserResponse:
    """ユーザーを登録し、PR取り込みをバックグラウンドで開始する。

    登録の成否はGitHub APIの可用性に依存しない。取り込みが全月で
    失敗しても登録自体は成功として扱う。

    Args:
        request: ユーザー登録リクエスト。
        background_tasks: FastAPIバックグラウンドタスク。
        session: データベースセッション。

    Returns:
        登録されたユーザー情報。
    """
    user = await register_user(session=session, request=request)

    background_tasks.add_task(ingest_user_job, user_id=user.user_id)
    logger.info("Scheduled ingestion for user %s", user.github_login)

    return UserResponse.model_validate(user)


@router.post(
    "/{github_user}/sync",
    response_model=SyncScheduledResponse,
    status_code=202,
    summary="PR取り込み再実行",
)
async def sync_user(
    github_user: str,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    tracked_months: list[str] = Depends(get_tracked_months),
) -> SyncScheduledResponse:
    """登録済みユーザーのPR取り込みをバックグラウンドで再実行する。

    Args:
        github_user: GitHubログイン名。
        background_tasks: FastAPIバックグラウンドタスク。
        session: データベースセッション。
        tracked_months: 追跡対象の月ラベル。

    Returns:
        受付レスポンス（202）。

    Raises:
        NotFoundError: ユーザーが登録されていない場合。
    """
    user = await get_user_by_login(session, github_user)
    if user is None:
        raise NotFoundError(detail=f"User '{github_user}' not found")

    background_tasks.add_task(ingest_user_job, user_id=user.user_id)
    logger.info("Re-scheduled ingestion for user %s", user.github_login)

    return SyncScheduledResponse(
        github_user=user.github_login,
        tracked_months=tracked_months,
    )
