"""
レスポンスキャッシュのテスト
"""
import sys
from pathlib import Path

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.cache import ResponseCache, build_cache_key


def test_get_returns_stored_data_within_ttl():
    """有効期間内は取得できる"""
    cache = ResponseCache(default_ttl=300)
    cache.set("key", '{"products": []}', now=1000.0)

    assert cache.get("key", now=1299.0) == '{"products": []}'


def test_expired_entry_is_evicted_on_read():
    """期限切れは取得時に削除される"""
    cache = ResponseCache(default_ttl=300)
    cache.set("key", "data", now=1000.0)

    assert cache.get("key", now=1301.0) is None
    assert len(cache) == 0


def test_custom_ttl_overrides_default():
    """個別のTTL指定"""
    cache = ResponseCache(default_ttl=300)
    cache.set("short", "data", ttl=10, now=0.0)

    assert cache.get("short", now=5.0) == "data"
    assert cache.get("short", now=11.0) is None


def test_missing_key_returns_none():
    """未登録のキー"""
    assert ResponseCache().get("nothing") is None


def test_cleanup_expired_counts_removed_entries():
    """期限切れの一括削除"""
    cache = ResponseCache(default_ttl=60)
    cache.set("old", "a", now=0.0)
    cache.set("new", "b", now=100.0)

    removed = cache.cleanup_expired(now=120.0)

    assert removed == 1
    assert len(cache) == 1
    assert cache.get("new", now=120.0) == "b"


def test_clear_and_delete():
    """削除操作"""
    cache = ResponseCache()
    cache.set("a", 1)
    cache.set("b", 2)

    cache.delete("a")
    assert "a" not in cache
    assert "b" in cache

    cache.clear()
    assert len(cache) == 0


def test_build_cache_key():
    """キャッシュキーの形式"""
    key = build_cache_key("GET", "https://api.printful.com/sync/products?category=caps")
    assert key == "printful:GET:https://api.printful.com/sync/products?category=caps"


def test_set_purges_expired_entries():
    """保存時に読まれていない期限切れエントリも削除される"""
    cache = ResponseCache(default_ttl=300)
    cache.set("old", "data", now=1000.0)
    cache.set("fresh", "data", now=1200.0)

    cache.set("new", "data", now=1400.0)

    assert len(cache) == 2
    assert cache.get("old", now=1400.0) is None
    assert cache.get("fresh", now=1400.0) == "data"
