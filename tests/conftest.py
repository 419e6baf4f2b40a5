"""共通のテストフィクスチャ"""
import sys
from pathlib import Path

import pytest

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

import app as app_module
from config import Config
from core.cache import response_cache
from core.rate_limiter import rate_limiter
from integrations.printful_client import PrintfulClient, PrintfulResponse


@pytest.fixture
def client(monkeypatch):
    """Flaskのテストクライアント（キャッシュとレート制限は毎回リセット）"""
    response_cache.clear()
    rate_limiter.clear()
    monkeypatch.setattr(Config, "PRINTFUL_API_KEY", "pf_test")
    app_module.app.config["TESTING"] = True

    with app_module.app.test_client() as test_client:
        yield test_client

    response_cache.clear()
    rate_limiter.clear()


@pytest.fixture
def printful_client(monkeypatch):
    """アプリが使うPrintfulクライアントを差し替える（requestはテスト側でモックする）"""
    pf_client = PrintfulClient(api_key="pf_test", base_url="https://api.printful.test")
    monkeypatch.setattr(app_module, "get_printful_client", lambda: pf_client)
    return pf_client


@pytest.fixture
def sync_products():
    """Printfulの商品一覧レスポンス"""
    return PrintfulResponse(200, {
        "code": 200,
        "result": [
            {"id": 1, "name": "Classic Tee", "thumbnail_url": "https://img.example/1.png", "variants": 2},
            {"id": 2, "name": "Logo Hoodie", "thumbnail_url": "https://img.example/2.png", "variants": 1},
        ],
    }, "https://api.printful.test/sync/products")
