"""月エンティティのレジストリ。

月ラベル（``YYYY-MM``）を一意な Month 行に解決する。
存在しない場合は作成する find-or-create を単一のアトミックな
INSERT ... ON CONFLICT DO NOTHING で実現する。
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from activity_tracker.core.exceptions import StorageError
from activity_tracker.models import Month

logger = logging.getLogger(__name__)


class MonthRegistry:
    """Month の find-or-create を担うサービス。"""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def resolve_month(self, label: str) -> Month:
        """月ラベルに対応する Month を取得し、なければ作成する。

        ``uq_months_name`` 制約を競合対象とした INSERT を先に発行し、
        その後ラベルで SELECT する。並行して同じ未登録ラベルを解決しても
        行は1つしか作られず、両者が同じ行を受け取る。

        Args:
            label: ``YYYY-MM`` 形式の月ラベル。

        Returns:
            対応する Month インスタンス。

        Raises:
            StorageError: データベース操作に失敗した場合。
        """
        insert_stmt = (
            pg_insert(Month)
            .values(name=label)
            .on_conflict_do_nothing(index_elements=[Month.name])
        )
        select_stmt = select(Month).where(Month.name == label)

        try:
            result = await self.session.execute(insert_stmt)
            if result.rowcount:
                logger.info("Created month %s", label)
            month_result = await self.session.execute(select_stmt)
            return month_result.scalar_one()
        except SQLAlchemyError as e:
            logger.error("Failed to resolve month %s: %s", label, e)
            raise StorageError(detail=f"Failed to resolve month {label}")

    async def get_month(self, label: str) -> Month | None:
        """月ラベルに対応する Month を取得する（作成はしない）。"""
        stmt = select(Month).where(Month.name == label)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
