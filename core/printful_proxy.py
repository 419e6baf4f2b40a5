"""
Printful APIプロキシ

フロントエンドからのリクエストをPrintful APIへ転送し、レスポンスを整形して返す。
GETレスポンスはキャッシュする。
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.cache import ResponseCache, build_cache_key
from core.catalog import build_product_detail, process_printful_response
from core.endpoint_mapper import map_endpoint
from integrations.printful_client import PrintfulClient, PrintfulConnectionError

logger = logging.getLogger(__name__)

BODY_METHODS = ("POST", "PUT", "PATCH")
VARIANT_KEYS = ("has_variants", "variant_count", "variants", "colors", "sizes", "main_image")


@dataclass
class ProxyResult:
    """
    プロキシの処理結果

    bodyはJSON文字列。cache_statusは "HIT" / "MISS"（キャッシュ対象外ならNone）。
    """
    status_code: int
    body: str
    cache_status: Optional[str] = None

    @classmethod
    def from_payload(cls, status_code: int, payload: Any, cache_status: Optional[str] = None) -> "ProxyResult":
        """辞書などのペイロードからJSON文字列の結果を作る"""
        return cls(status_code=status_code, body=json.dumps(payload), cache_status=cache_status)


def missing_api_key_result() -> ProxyResult:
    """APIキー未設定時のレスポンス"""
    return ProxyResult.from_payload(500, {
        "error": "Printful API key not configured",
        "code": "MISSING_API_KEY",
    })


class PrintfulProxy:
    """
    Printful APIプロキシクラス

    エンドポイント変換 → キャッシュ確認 → 転送 → 整形 → キャッシュ保存 の順に処理する。
    """

    def __init__(self, client: PrintfulClient, cache: ResponseCache):
        """
        プロキシを初期化する。

        Args:
            client: Printful APIクライアント
            cache: レスポンスキャッシュ
        """
        self.client = client
        self.cache = cache

    def handle(
        self,
        method: str,
        path: str,
        query_string: str = "",
        params: Optional[Mapping] = None,
        content_type: str = "",
        body: Optional[str] = None,
    ) -> ProxyResult:
        """
        リクエストを転送する。

        Args:
            method: HTTPメソッド
            path: /api/printful 以降のパス
            query_string: 元のクエリ文字列（そのままPrintfulへ渡す）
            params: パース済みのクエリパラメータ
            content_type: リクエストのContent-Type
            body: リクエストボディ

        Returns:
            ProxyResult: レスポンス
        """
        method = method.upper()
        params = params or {}
        endpoint = map_endpoint(path or "/", params.get("category"))
        target_url = self.client.build_url(endpoint, query_string)

        # JSONボディのみ転送する
        forward_body = None
        if method in BODY_METHODS and "application/json" in (content_type or ""):
            forward_body = body

        cache_key = build_cache_key(method, target_url)
        if method == "GET":
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.info("Cache hit for: %s", target_url)
                return ProxyResult(status_code=200, body=cached, cache_status="HIT")

        try:
            response = self.client.request(method, endpoint, query_string, forward_body)
        except PrintfulConnectionError as e:
            return ProxyResult.from_payload(503, {
                "error": "Failed to connect to Printful",
                "message": str(e),
                "code": "CONNECTION_ERROR",
            })

        if not response.ok:
            logger.error(
                "Printful API Error: status=%s url=%s response=%s",
                response.status_code, target_url, response.data,
            )
            return ProxyResult.from_payload(response.status_code, {
                "error": "Printful API error",
                "status": response.status_code,
                "message": response.error_message,
                "details": response.data,
            })

        processed = process_printful_response(response.data, endpoint, params)
        if str(params.get("variants", "")).lower() == "true":
            self.attach_variants(processed)

        body_text = json.dumps(processed)
        if method == "GET":
            self.cache.set(cache_key, body_text)

        return ProxyResult(status_code=response.status_code, body=body_text, cache_status="MISS")

    def attach_variants(self, processed: Any) -> None:
        """
        一覧レスポンスの各商品にバリエーション情報を付与する（商品ごとに詳細を取得）。

        詳細の取得に失敗した商品はそのまま残す。

        Args:
            processed: process_printful_response の戻り値（その場で更新する）
        """
        if not isinstance(processed, dict):
            return

        if isinstance(processed.get("products"), list):
            products = processed["products"]
        elif isinstance(processed.get("product"), dict) and "variants" not in processed["product"]:
            products = [processed["product"]]
        else:
            return

        for product in products:
            product_id = product.get("id")
            if product_id is None:
                continue

            try:
                response = self.client.get_sync_product(product_id)
            except PrintfulConnectionError as e:
                logger.warning("Could not load variants for product %s: %s", product_id, e)
                continue

            result = response.data.get("result") if isinstance(response.data, dict) else None
            if not response.ok or not isinstance(result, dict):
                logger.warning("Could not load variants for product %s: HTTP %s", product_id, response.status_code)
                continue

            detail = build_product_detail(result).to_dict()
            for key in VARIANT_KEYS:
                product[key] = detail.get(key)
            # 一覧APIは価格を返さないため、バリエーションの価格で補う
            if product.get("price") is None:
                product["price"] = detail.get("price")
                product["currency"] = detail.get("currency")

        if "products" in processed:
            processed["hasVariants"] = any(p.get("has_variants") for p in products)
