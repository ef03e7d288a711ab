"""Tests for ``IngestionService``."""

from __future__ import annotations

import re
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError

from activity_tracker.core.exceptions import DecodeError, StorageError, TransportError
from activity_tracker.external.github_client import SourcePullRequest
from activity_tracker.services.ingestion_service import (
    IngestionService,
    build_pull_request_rows,
)
from tests.conftest import TRACKED_MONTHS, make_month

SEPTEMBER = make_month(10, "2025-09")
OCTOBER = make_month(11, "2025-10")


def _pr(n: int, status: str) -> SourcePullRequest:
    return SourcePullRequest(
        title=f"PR {n}",
        status=status,
        url=f"https://github.com/octo/repo/pull/{n}",
        merged=status == "closed",
    )


def _service(
    mock_session: AsyncMock,
    fetched: dict[str, object],
) -> IngestionService:
    """Build a service whose client returns (or raises) ``fetched[month]``."""

    async def _search(handle: str, month: str) -> list[SourcePullRequest]:
        outcome = fetched[month]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome  # type: ignore[return-value]

    client = MagicMock()
    client.search_pull_requests = AsyncMock(side_effect=_search)

    service = IngestionService(session=mock_session, client=client)
    service.months = AsyncMock()
    service.months.resolve_month.side_effect = lambda label: {
        "2025-09": SEPTEMBER,
        "2025-10": OCTOBER,
    }[label]
    return service


def _inserted_rows(mock_session: AsyncMock) -> list[list[dict]]:
    """Parameters of every INSERT issued through ``session.execute``."""
    columns = ("user_id", "month_id", "status", "merged")
    pattern = re.compile(r"^(%s)(?:_m(\d+))?$" % "|".join(columns))
    batches = []
    for call in mock_session.execute.call_args_list:
        compiled = call.args[0].compile(dialect=postgresql.dialect())
        assert "ON CONFLICT (user_id, url) DO NOTHING" in str(compiled)
        rows: dict[int, dict] = {}
        for key, value in compiled.params.items():
            match = pattern.match(key)
            if match:
                index = int(match.group(2) or 0)
                rows.setdefault(index, {})[match.group(1)] = value
        batches.append([rows[i] for i in sorted(rows)])
    return batches


class TestIngest:
    """IngestionService.ingest"""

    @pytest.mark.asyncio
    async def test_persists_prs_for_each_month(
        self,
        mock_session: AsyncMock,
        alice: SimpleNamespace,
    ) -> None:
        mock_session.execute.return_value = MagicMock(rowcount=2)
        service = _service(
            mock_session,
            {"2025-09": [_pr(1, "closed"), _pr(2, "open")], "2025-10": []},
        )

        persisted = await service.ingest(alice, TRACKED_MONTHS)

        assert persisted == {"2025-09": 2, "2025-10": 0}
        service.client.search_pull_requests.assert_any_await("alice", "2025-09")
        service.client.search_pull_requests.assert_any_await("alice", "2025-10")
        # empty month resolves the month but issues no INSERT
        assert service.months.resolve_month.await_count == 2
        [rows] = _inserted_rows(mock_session)
        assert rows == [
            {"user_id": 1, "month_id": 10, "status": "closed", "merged": True},
            {"user_id": 1, "month_id": 10, "status": "open", "merged": False},
        ]

    @pytest.mark.asyncio
    async def test_fetch_failure_skips_only_that_month(
        self,
        mock_session: AsyncMock,
        alice: SimpleNamespace,
    ) -> None:
        mock_session.execute.return_value = MagicMock(rowcount=1)
        service = _service(
            mock_session,
            {
                "2025-09": TransportError("timed out"),
                "2025-10": [_pr(3, "open")],
            },
        )

        persisted = await service.ingest(alice, TRACKED_MONTHS)

        assert persisted == {"2025-10": 1}
        service.months.resolve_month.assert_awaited_once_with("2025-10")
        [rows] = _inserted_rows(mock_session)
        assert rows[0]["month_id"] == 11

    @pytest.mark.asyncio
    async def test_all_fetches_failing_does_not_raise(
        self,
        mock_session: AsyncMock,
        alice: SimpleNamespace,
    ) -> None:
        service = _service(
            mock_session,
            {
                "2025-09": DecodeError("bad body"),
                "2025-10": TransportError("503"),
            },
        )

        assert await service.ingest(alice, TRACKED_MONTHS) == {}
        service.months.resolve_month.assert_not_awaited()
        mock_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_storage_failure_is_isolated_per_month(
        self,
        mock_session: AsyncMock,
        alice: SimpleNamespace,
    ) -> None:
        mock_session.execute.side_effect = [
            IntegrityError("INSERT", {}, Exception("fk violation")),
            MagicMock(rowcount=1),
        ]
        service = _service(
            mock_session,
            {"2025-09": [_pr(1, "open")], "2025-10": [_pr(2, "closed")]},
        )

        persisted = await service.ingest(alice, TRACKED_MONTHS)

        assert persisted == {"2025-10": 1}
        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_month_registry_failure_skips_month(
        self,
        mock_session: AsyncMock,
        alice: SimpleNamespace,
    ) -> None:
        mock_session.execute.return_value = MagicMock(rowcount=1)
        service = _service(
            mock_session,
            {"2025-09": [_pr(1, "open")], "2025-10": [_pr(2, "open")]},
        )
        service.months.resolve_month.side_effect = [
            StorageError("db down"),
            OCTOBER,
        ]

        persisted = await service.ingest(alice, TRACKED_MONTHS)

        assert persisted == {"2025-10": 1}

    @pytest.mark.asyncio
    async def test_months_processed_in_given_order(
        self,
        mock_session: AsyncMock,
        alice: SimpleNamespace,
    ) -> None:
        service = _service(mock_session, {"2025-09": [], "2025-10": []})

        await service.ingest(alice, ["2025-10", "2025-09"])

        months = [
            call.args[1] for call in service.client.search_pull_requests.await_args_list
        ]
        assert months == ["2025-10", "2025-09"]

    @pytest.mark.asyncio
    async def test_commits_each_month_before_next_fetch(
        self,
        mock_session: AsyncMock,
        alice: SimpleNamespace,
    ) -> None:
        """A month's rows are committed before the next GitHub call, so a
        failure later on never rolls back months already stored."""
        events: list[str] = []
        mock_session.execute.return_value = MagicMock(rowcount=1)
        mock_session.commit.side_effect = lambda: events.append("commit")
        service = _service(
            mock_session,
            {
                "2025-09": [_pr(1, "open")],
                "2025-10": TransportError("timed out"),
                "2025-11": [_pr(2, "open")],
            },
        )
        search = service.client.search_pull_requests.side_effect

        async def _recording_search(handle: str, month: str) -> list:
            events.append(f"fetch {month}")
            return await search(handle, month)

        service.client.search_pull_requests.side_effect = _recording_search
        service.months.resolve_month.side_effect = lambda label: make_month(
            12, label,
        )

        persisted = await service.ingest(alice, ["2025-09", "2025-10", "2025-11"])

        assert persisted == {"2025-09": 1, "2025-11": 1}
        assert events == [
            "fetch 2025-09",
            "commit",
            "fetch 2025-10",
            "fetch 2025-11",
            "commit",
        ]
        mock_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_month_is_still_committed(
        self,
        mock_session: AsyncMock,
        alice: SimpleNamespace,
    ) -> None:
        """The resolved month row is committed even when there are no PRs."""
        service = _service(mock_session, {"2025-09": [], "2025-10": []})

        await service.ingest(alice, TRACKED_MONTHS)

        assert mock_session.commit.await_count == 2


class TestBuildPullRequestRows:
    """build_pull_request_rows"""

    def test_rows_reference_user_and_month_without_org_or_project(
        self,
        alice: SimpleNamespace,
    ) -> None:
        rows = build_pull_request_rows(alice.user_id, OCTOBER, [_pr(7, "closed")])

        assert rows == [
            {
                "user_id": 1,
                "month_id": 11,
                "title": "PR 7",
                "url": "https://github.com/octo/repo/pull/7",
                "status": "closed",
                "merged": True,
            }
        ]
