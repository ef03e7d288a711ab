"""ユーザーサービスモジュール。

ユーザー登録と GitHubログイン名による検索のビジネスロジックを提供する。
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from activity_tracker.core.exceptions import ConflictError
from activity_tracker.models import User
from activity_tracker.schemas.user import UserCreateRequest

logger = logging.getLogger(__name__)


async def get_user_by_login(
    session: AsyncSession,
    github_login: str,
) -> User | None:
    """GitHubログイン名でユーザーを取得する。"""
    stmt = select(User).where(User.github_login == github_login)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def register_user(
    session: AsyncSession,
    request: UserCreateRequest,
) -> User:
    """新規ユーザーを登録する。

    PRの取り込みは行わない。呼び出し側がバックグラウンドタスクとして
    ``ingest_user_job`` を登録する。

    Args:
        session: データベースセッション。
        request: ユーザー登録リクエスト。

    Returns:
        作成されたUserオブジェクト。

    Raises:
        ConflictError: GitHubログイン名が既に登録されている場合。
    """
    existing_user = await get_user_by_login(session, request.github_user)
    if existing_user is not None:
        raise ConflictError(
            detail=f"User '{request.github_user}' already exists",
        )

    user = User(
        name=request.name,
        github_login=request.github_user,
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        # 並行登録でユニーク制約に抵触した場合
        await session.rollback()
        raise ConflictError(
            detail=f"User '{request.github_user}' already exists",
        )
    await session.refresh(user)

    logger.info("Registered user %s (user_id=%d)", user.github_login, user.user_id)
    return user
