"""
レスポンスキャッシュモジュール

Printful APIのGETレスポンスを一定時間メモリ上に保持する。
プロセス再起動でリセットされる。
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

from config import Config

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """キャッシュの1エントリ"""
    data: Any
    expires_at: float

    def is_expired(self, now: Optional[float] = None) -> bool:
        """有効期限切れかどうか"""
        return (now if now is not None else time.time()) > self.expires_at


def build_cache_key(method: str, target_url: str) -> str:
    """
    プロキシ用のキャッシュキーを生成する。

    Args:
        method: HTTPメソッド
        target_url: 転送先のURL（クエリ文字列を含む）

    Returns:
        str: 例 "printful:GET:https://api.printful.com/sync/products"
    """
    return f"printful:{method}:{target_url}"


class ResponseCache:
    """
    TTL付きインメモリキャッシュ

    期限切れのエントリは読み出し時に削除する。
    """

    def __init__(self, default_ttl: int = 300):
        """
        キャッシュを初期化する。

        Args:
            default_ttl: 既定の有効期間（秒）
        """
        self.default_ttl = default_ttl
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str, now: Optional[float] = None) -> Optional[Any]:
        """
        キャッシュからデータを取得する。

        Args:
            key: キャッシュキー
            now: 現在時刻（省略時はtime.time()）

        Returns:
            Optional[Any]: キャッシュされたデータ（未登録・期限切れならNone）
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired(now):
            self._entries.pop(key, None)
            return None

        return entry.data

    def set(self, key: str, data: Any, ttl: Optional[int] = None, now: Optional[float] = None) -> None:
        """
        データをキャッシュに保存する。

        保存のたびに期限切れのエントリを掃除する。

        Args:
            key: キャッシュキー
            data: 保存するデータ
            ttl: 有効期間（秒、省略時は既定値）
            now: 現在時刻（省略時はtime.time()）
        """
        ttl = self.default_ttl if ttl is None else ttl
        current = now if now is not None else time.time()
        self.cleanup_expired(current)
        self._entries[key] = CacheEntry(data=data, expires_at=current + ttl)

    def delete(self, key: str) -> None:
        """キャッシュを削除する"""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """すべてのキャッシュを削除する"""
        self._entries.clear()

    def cleanup_expired(self, now: Optional[float] = None) -> int:
        """
        期限切れのエントリをまとめて削除する。

        Returns:
            int: 削除したエントリ数
        """
        # 他スレッドと同時に呼ばれることがある
        expired_keys = [key for key, entry in list(self._entries.items()) if entry.is_expired(now)]
        for key in expired_keys:
            self._entries.pop(key, None)

        if expired_keys:
            logger.debug("Removed %d expired cache entries", len(expired_keys))
        return len(expired_keys)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


# グローバルインスタンス
response_cache = ResponseCache(default_ttl=Config.CACHE_TTL_SECONDS)
