"""Tests for the aggregation endpoints and ``/health``."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from activity_tracker.schemas.aggregation import (
    DashboardEntry,
    DashboardPR,
    LeaderboardEntry,
    TrackedPR,
    TrackPRsResult,
)
from tests.conftest import TRACKED_MONTHS

CREATED = datetime(2025, 9, 3, 12, 0, tzinfo=timezone.utc)


class TestHealth:
    """GET /health"""

    @pytest.mark.asyncio
    async def test_health(self, async_client: AsyncClient) -> None:
        resp = await async_client.get("/health")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestLeaderboard:
    """GET /api/v1/leaderboard"""

    @pytest.mark.asyncio
    async def test_leaderboard(self, async_client: AsyncClient) -> None:
        fake = [
            LeaderboardEntry(name="Alice", github_user="alice", pr_count=2),
            LeaderboardEntry(name="Bob", github_user="bob", pr_count=0),
        ]

        with patch("activity_tracker.api.v1.aggregation.AggregationService") as MockSvc:
            instance = AsyncMock()
            instance.get_leaderboard.return_value = fake
            MockSvc.return_value = instance

            resp = await async_client.get("/api/v1/leaderboard")

        assert resp.status_code == 200
        assert resp.json() == [
            {"name": "Alice", "github_user": "alice", "pr_count": 2},
            {"name": "Bob", "github_user": "bob", "pr_count": 0},
        ]
        instance.get_leaderboard.assert_awaited_once_with(TRACKED_MONTHS)


class TestAdminDashboard:
    """GET /api/v1/admin-dashboard"""

    @pytest.mark.asyncio
    async def test_dashboard(self, async_client: AsyncClient) -> None:
        fake = [
            DashboardEntry(
                name="Alice",
                github_user="alice",
                prs=[
                    DashboardPR(
                        id=1,
                        title="Fix flaky test",
                        url="https://github.com/octo/repo/pull/1",
                        status="closed",
                        merged=True,
                        month="2025-09",
                        created_at=CREATED,
                    ),
                ],
            ),
        ]

        with patch("activity_tracker.api.v1.aggregation.AggregationService") as MockSvc:
            instance = AsyncMock()
            instance.get_dashboard.return_value = fake
            MockSvc.return_value = instance

            resp = await async_client.get("/api/v1/admin-dashboard")

        assert resp.status_code == 200
        body = resp.json()
        assert body[0]["github_user"] == "alice"
        assert body[0]["prs"][0]["id"] == 1
        assert body[0]["prs"][0]["merged"] is True
        assert body[0]["prs"][0]["month"] == "2025-09"


class TestTrackPRs:
    """POST /api/v1/track-prs"""

    @pytest.mark.asyncio
    async def test_track_prs(self, async_client: AsyncClient) -> None:
        fake = [
            TrackPRsResult(
                username="alice",
                prs=[
                    TrackedPR(
                        id=7,
                        title="Add docs",
                        url="https://github.com/octo/repo/pull/7",
                        status="open",
                        merged=False,
                        created=CREATED,
                        month="2025-09",
                    ),
                ],
            ),
            TrackPRsResult(username="ghost", prs=None),
        ]

        with patch("activity_tracker.api.v1.aggregation.AggregationService") as MockSvc:
            instance = AsyncMock()
            instance.track_prs.return_value = fake
            MockSvc.return_value = instance

            resp = await async_client.post(
                "/api/v1/track-prs",
                json={"usernames": ["alice", "ghost"], "month_name": "2025-09"},
            )

        assert resp.status_code == 200
        body = resp.json()
        assert body[0]["username"] == "alice"
        assert body[0]["prs"][0]["org"] is None
        assert body[0]["prs"][0]["project"] is None
        assert body[1] == {"username": "ghost", "prs": None}
        instance.track_prs.assert_awaited_once_with(["alice", "ghost"], "2025-09")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("month_name", ["2025-9", "2025-13", "September"])
    async def test_malformed_month_returns_422(
        self,
        async_client: AsyncClient,
        month_name: str,
    ) -> None:
        resp = await async_client.post(
            "/api/v1/track-prs",
            json={"usernames": ["alice"], "month_name": month_name},
        )

        assert resp.status_code == 422
