"""API v1 ルーター集約モジュール。

各ドメインのルーターを統合し、プレフィックスとタグを設定する。
"""

from __future__ import annotations

from fastapi import APIRouter

from activity_tracker.api.v1.aggregation import router as aggregation_router
from activity_tracker.api.v1.users import router as users_router

router = APIRouter()

router.include_router(
    users_router,
    prefix="/users",
    tags=["users"],
)

router.include_router(
    aggregation_router,
    tags=["aggregation"],
)
