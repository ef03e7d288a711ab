"""FastAPI依存性注入モジュール。

データベースセッションは ``activity_tracker.database.get_session`` を再利用する。
"""

from __future__ import annotations

from activity_tracker.config import settings
from activity_tracker.database import get_session  # noqa: F401 – re-export for convenience


def get_tracked_months() -> list[str]:
    """追跡対象の月ラベルを返す。

    取り込みと集計ビューが同じ設定値を参照するための依存関数。
    テストでは ``dependency_overrides`` で差し替える。
    """
    return list(settings.TRACKED_MONTHS)
