"""GitHub Search API 非同期クライアント。

httpx.AsyncClient を使用し、ユーザー・月単位でPR検索結果を取得して
正規化済みレコードに変換する。キャッシュ、リトライ、ページネーション、
レート制限管理は行わない（1呼び出し = 1リクエスト）。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from activity_tracker.config import (
    GITHUB_LOGIN_PATTERN,
    MONTH_LABEL_PATTERN,
    settings,
)
from activity_tracker.core.exceptions import DecodeError, TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourcePullRequest:
    """検索結果1件を正規化したPRレコード。

    Attributes:
        title: PRタイトル。
        status: GitHubの生の state 文字列 ("open" / "closed")。
        url: PRのHTML URL。
        merged: ``status == "closed"`` による近似値。正確なマージ判定には
            PRごとに追加のAPI呼び出しが必要になるため行わない。
    """

    title: str
    status: str
    url: str
    merged: bool

    @classmethod
    def from_search_item(cls, item: dict[str, Any]) -> SourcePullRequest:
        """Search API の ``items[]`` 要素から生成する。

        Raises:
            DecodeError: 必須フィールドが欠けている、または型が不正な場合。
        """
        try:
            title = item["title"]
            state = item["state"]
            html_url = item["html_url"]
        except (KeyError, TypeError) as e:
            raise DecodeError(detail=f"Search item is missing a field: {e}") from e

        if not all(isinstance(v, str) for v in (title, state, html_url)):
            raise DecodeError(detail="Search item fields must be strings")

        return cls(
            title=title,
            status=state,
            url=html_url,
            merged=state == "closed",
        )


class GitHubClient:
    """GitHub Search API 非同期クライアント。

    Attributes:
        SEARCH_PATH: Issues/PR 検索エンドポイントのパス。
    """

    SEARCH_PATH = "/search/issues"

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """GitHubClientを初期化する。

        Args:
            base_url: GitHub API のベースURL。未指定時は設定値。
            token: GitHub Personal Access Token（任意）。未指定時は設定値。
            timeout: リクエストタイムアウト秒数。未指定時は設定値。
            transport: httpx トランスポート（テスト用）。
        """
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        token = token if token is not None else settings.GITHUB_TOKEN
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=base_url or settings.GITHUB_API_URL,
            headers=headers,
            timeout=httpx.Timeout(timeout or settings.GITHUB_TIMEOUT_SECONDS),
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Public API Methods
    # ------------------------------------------------------------------

    async def search_pull_requests(
        self,
        handle: str,
        month: str,
    ) -> list[SourcePullRequest]:
        """指定ユーザーが指定月に作成したPR一覧を取得する。

        検索クエリ: ``author:{handle} type:pr created:{month}``。
        結果の順序はGitHubの返却順（安定性は保証されない）。

        Args:
            handle: GitHubログイン名。
            month: ``YYYY-MM`` 形式の月ラベル。

        Returns:
            正規化済みPRレコードのリスト。

        Raises:
            ValueError: 引数が不正な場合。
            TransportError: 通信失敗、タイムアウト、エラーステータスの場合。
            DecodeError: レスポンスボディが不正な場合。
        """
        if not GITHUB_LOGIN_PATTERN.fullmatch(handle):
            raise ValueError(f"Invalid GitHub login {handle!r}")
        if not MONTH_LABEL_PATTERN.match(month):
            raise ValueError(f"Invalid month label {month!r}, expected YYYY-MM")

        params = {"q": f"author:{handle} type:pr created:{month}"}

        try:
            response = await self._client.get(self.SEARCH_PATH, params=params)
        except httpx.HTTPError as e:
            logger.error(
                "GitHub search request failed for %s/%s: %s",
                handle,
                month,
                e,
            )
            raise TransportError(detail=f"GitHub API request failed: {e}") from e

        if response.status_code >= 400:
            raise TransportError(
                detail=(
                    f"GitHub API error {response.status_code}: "
                    f"{response.text[:200]}"
                )
            )

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(detail=f"GitHub API returned invalid JSON: {e}") from e

        items = data.get("items") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise DecodeError(detail="GitHub API response has no 'items' list")

        prs = [SourcePullRequest.from_search_item(item) for item in items]
        logger.debug("Fetched %d PRs for %s in %s", len(prs), handle, month)
        return prs

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """HTTPクライアントセッションを閉じる。"""
        await self._client.aclose()
        logger.debug("GitHubClient session closed")

    async def __aenter__(self) -> GitHubClient:
        """async with 構文のサポート。"""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """async with 構文のサポート。"""
        await self.close()
