"""カスタム例外クラスおよびFastAPI例外ハンドラ登録。

アプリケーション全体で使用するドメイン固有の例外階層と、
FastAPIアプリケーションへのハンドラ登録関数を提供する。
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# 基底例外
# ---------------------------------------------------------------------------

class AppException(Exception):
    """アプリケーション基底例外。

    Attributes:
        status_code: HTTPステータスコード。
        detail: エラー詳細メッセージ。
    """

    def __init__(
        self,
        status_code: int = 500,
        detail: str = "Internal server error",
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(detail)


# ---------------------------------------------------------------------------
# リソース
# ---------------------------------------------------------------------------

class NotFoundError(AppException):
    """リソース未検出エラー (404 Not Found)。"""

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=404, detail=detail)


class ConflictError(AppException):
    """一意キー重複エラー (409 Conflict)。"""

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=409, detail=detail)


# ---------------------------------------------------------------------------
# 外部API
# ---------------------------------------------------------------------------

class ExternalAPIError(AppException):
    """外部APIエラー (502 Bad Gateway)。"""

    def __init__(self, detail: str = "External API error") -> None:
        super().__init__(status_code=502, detail=detail)


class TransportError(ExternalAPIError):
    """GitHub APIへの通信失敗・タイムアウト・エラーステータス。"""

    def __init__(self, detail: str = "GitHub API request failed") -> None:
        super().__init__(detail=detail)


class DecodeError(ExternalAPIError):
    """GitHub APIレスポンスの形式不正。"""

    def __init__(self, detail: str = "Malformed GitHub API response") -> None:
        super().__init__(detail=detail)


# ---------------------------------------------------------------------------
# ストレージ
# ---------------------------------------------------------------------------

class StorageError(AppException):
    """データベース操作エラー (500 Internal Server Error)。"""

    def __init__(self, detail: str = "Storage operation failed") -> None:
        super().__init__(status_code=500, detail=detail)


# ---------------------------------------------------------------------------
# FastAPI例外ハンドラ登録
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI) -> None:
    """FastAPIアプリケーションにカスタム例外ハンドラを登録する。

    Args:
        app: FastAPIアプリケーションインスタンス。
    """

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request,
        exc: AppException,
    ) -> JSONResponse:
        """AppException系例外をJSON形式でレスポンスする。"""
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """未処理例外をキャッチし500レスポンスを返す。"""
        logger.exception(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )
