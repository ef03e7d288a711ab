"""ユーザー関連のPydanticスキーマ。

ユーザー登録とレスポンスに使用するスキーマを定義する。
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from activity_tracker.config import GITHUB_LOGIN_PATTERN


class UserCreateRequest(BaseModel):
    """ユーザー登録リクエスト。"""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="表示名",
    )
    github_user: str = Field(
        ...,
        min_length=1,
        max_length=39,
        description="GitHubログイン名",
    )

    @field_validator("github_user")
    @classmethod
    def _validate_github_user(cls, value: str) -> str:
        # 英数字と単独のハイフンのみ。先頭・末尾のハイフン不可
        if not GITHUB_LOGIN_PATTERN.fullmatch(value):
            raise ValueError(f"Invalid GitHub login {value!r}")
        return value


class UserResponse(BaseModel):
    """ユーザー情報レスポンス。"""

    model_config = ConfigDict(from_attributes=True)

    user_id: int
    name: str
    github_user: str = Field(validation_alias="github_login")
    created_at: datetime


class SyncScheduledResponse(BaseModel):
    """取り込み再実行の受付レスポンス。"""

    github_user: str
    tracked_months: list[str]
    message: str = Field(
        default="Ingestion scheduled",
        description="ステータスメッセージ",
    )
