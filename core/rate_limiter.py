"""
レート制限モジュール

クライアント（IPアドレス）ごとのリクエスト数をスライディングウィンドウで制限する。
メモリ上に保持（サーバー再起動でリセット）。
"""
import time
from dataclasses import dataclass
from typing import Mapping, Optional

from config import Config

UNKNOWN_CLIENT = "unknown"


@dataclass
class RateLimitResult:
    """レート制限の判定結果"""
    allowed: bool
    remaining: int


def get_client_id(headers: Mapping, remote_addr: Optional[str] = None) -> str:
    """
    リクエスト元を識別するIDを取得する。

    Cloudflare経由ならCF-Connecting-IP、プロキシ経由ならX-Forwarded-Forの先頭を使う。

    Args:
        headers: リクエストヘッダー
        remote_addr: 接続元アドレス

    Returns:
        str: クライアントID（不明なら "unknown"）
    """
    cf_ip = headers.get("CF-Connecting-IP")
    if cf_ip:
        return cf_ip.strip()

    forwarded_for = headers.get("X-Forwarded-For")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    return remote_addr or UNKNOWN_CLIENT


class RateLimiter:
    """
    レート制限クラス

    全クライアントのリクエスト時刻を管理する。
    """

    def __init__(self, max_requests: int = 100, window_seconds: float = 60):
        """
        レート制限を初期化する。

        Args:
            max_requests: ウィンドウ内に許可するリクエスト数
            window_seconds: ウィンドウの長さ（秒）
        """
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: dict[str, list[float]] = {}

    def _cleanup(self, window_start: float) -> None:
        """ウィンドウ外のリクエスト時刻を削除し、空になったクライアントを消す"""
        # 他スレッドと同時に呼ばれることがある
        for client_id, timestamps in list(self._requests.items()):
            recent = [t for t in list(timestamps) if t > window_start]
            if recent:
                self._requests[client_id] = recent
            else:
                self._requests.pop(client_id, None)

    def check(self, client_id: str, now: Optional[float] = None) -> RateLimitResult:
        """
        リクエストを許可するか判定し、許可した場合は記録する。

        Args:
            client_id: クライアントID
            now: 現在時刻（省略時はtime.time()）

        Returns:
            RateLimitResult: 判定結果と残りリクエスト数
        """
        now = time.time() if now is None else now
        self._cleanup(now - self.window_seconds)

        recent = self._requests.get(client_id, [])
        if len(recent) >= self.max_requests:
            return RateLimitResult(allowed=False, remaining=0)

        recent.append(now)
        self._requests[client_id] = recent

        return RateLimitResult(allowed=True, remaining=self.max_requests - len(recent))

    def reset(self, client_id: str) -> None:
        """
        クライアントの記録を削除する。

        Args:
            client_id: クライアントID
        """
        self._requests.pop(client_id, None)

    def clear(self) -> None:
        """すべての記録を削除する"""
        self._requests.clear()

    def __len__(self) -> int:
        return len(self._requests)


# グローバルインスタンス
rate_limiter = RateLimiter(
    max_requests=Config.RATE_LIMIT_MAX_REQUESTS,
    window_seconds=Config.RATE_LIMIT_WINDOW_SECONDS,
)
