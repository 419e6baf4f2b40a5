"""
エンドポイント変換

フロントエンド向けの短いパスをPrintful APIのエンドポイントに変換する。
"""
from typing import Optional

ENDPOINT_MAP = {
    "/products": "/sync/products",
    "/store": "/store",
    "/store/products": "/sync/products",
    "/categories": "/categories",
    "/mockups": "/mockup-generator/templates",
    "/orders": "/orders",
    "/shipping": "/shipping/rates",
}


def map_endpoint(endpoint: str, category: Optional[str] = None) -> str:
    """
    フロントエンドのエンドポイントをPrintfulのエンドポイントに変換する。

    対応表にないパスはそのまま返す（Printful APIへ素通し）。

    Args:
        endpoint: /api/printful 以降のパス（例: "/products"）
        category: カテゴリ指定（商品一覧は常にsync productsを参照する）

    Returns:
        str: PrintfulのAPIパス
    """
    endpoint = endpoint or "/"

    # カテゴリ絞り込みはsync productsの取得後に行う
    if endpoint == "/products" and category:
        return "/sync/products"

    return ENDPOINT_MAP.get(endpoint, endpoint)
