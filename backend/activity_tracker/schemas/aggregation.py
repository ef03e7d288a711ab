"""集計ビュー関連のPydanticスキーマ。

リーダーボード、管理ダッシュボード、ユーザー×月のPR検索の
レスポンススキーマを定義する。
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from activity_tracker.config import MONTH_LABEL_PATTERN


# ---------------------------------------------------------------------------
# リーダーボード
# ---------------------------------------------------------------------------

class LeaderboardEntry(BaseModel):
    """リーダーボードの1行。"""

    name: str
    github_user: str
    pr_count: int = Field(..., ge=0, description="追跡対象月のPR数")


# ---------------------------------------------------------------------------
# 管理ダッシュボード
# ---------------------------------------------------------------------------

class DashboardPR(BaseModel):
    """ダッシュボードに表示するPRレコード。"""

    id: int
    title: str
    url: str
    status: str
    merged: bool
    month: str
    created_at: datetime


class DashboardEntry(BaseModel):
    """ユーザーごとのダッシュボードエントリ。"""

    name: str
    github_user: str
    prs: list[DashboardPR]


# ---------------------------------------------------------------------------
# ユーザー×月のPR検索
# ---------------------------------------------------------------------------

class TrackPRsRequest(BaseModel):
    """PR検索リクエスト。"""

    usernames: list[str] = Field(
        ...,
        description="検索対象のGitHubログイン名リスト",
    )
    month_name: str = Field(
        ...,
        pattern=MONTH_LABEL_PATTERN.pattern,
        description="YYYY-MM 形式の月ラベル",
    )


class TrackedPR(BaseModel):
    """関連エンティティの表示名付きPRレコード。"""

    id: int
    title: str
    url: str
    status: str
    merged: bool
    created: datetime
    org: Optional[str] = None
    project: Optional[str] = None
    month: str


class TrackPRsResult(BaseModel):
    """ハンドルごとの検索結果。ユーザーまたは月が未登録の場合 prs は None。"""

    username: str
    prs: Optional[list[TrackedPR]] = None
