"""
DRESS ストアフロントAPIクライアント

ブラウザ側のスクリプトと同じ手順でプロキシAPIを呼び出す。
商品一覧の取得（キャッシュ付き）、お問い合わせ送信、アクセス解析イベントの送信を担当する。
"""
import logging
import time
from typing import Any, Optional

import requests

from core.cache import ResponseCache
from core.catalog import group_products_by_category
from models.product import ContactMessage

logger = logging.getLogger(__name__)

PRODUCTS_ENDPOINT = "/api/printful/products"
CONTACT_ENDPOINT = "/api/contact"
ANALYTICS_ENDPOINT = "/api/analytics"

PRODUCTS_CACHE_TTL = 5 * 60  # 5分


class DressApiError(Exception):
    """APIが2xx以外を返した"""

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"API Error: {status_code} {reason}".strip())


class DressApiClient:
    """
    ストアフロントAPIクライアント

    失敗時は一定回数まで再試行する（待ち時間は retry_delay × 試行回数）。
    タイムアウトは再試行しない。
    """

    BODY_METHODS = {"POST", "PUT", "PATCH"}

    def __init__(
        self,
        base_url: str,
        timeout: float = 15,
        retry_attempts: int = 3,
        retry_delay: float = 1.0,
        enable_cache: bool = True,
    ):
        """
        クライアントを初期化する。

        Args:
            base_url: サイトのURL（例: "https://dress.example.com"）
            timeout: タイムアウト（秒）
            retry_attempts: 再試行の最大回数
            retry_delay: 再試行の基本待ち時間（秒）
            enable_cache: 商品一覧をキャッシュするか
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self.enable_cache = enable_cache

        self.cache = ResponseCache(default_ttl=PRODUCTS_CACHE_TTL)
        self.products: Optional[Any] = None

        self.session = requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def api_call(self, endpoint: str, method: str = "GET", body: Optional[dict] = None) -> Any:
        """
        APIを呼び出す（失敗時は再試行）。

        Args:
            endpoint: エンドポイント（例: "/api/contact"）
            method: HTTPメソッド
            body: リクエストボディ（POST/PUT/PATCHのみ送信）

        Returns:
            Any: JSONレスポンスならパース結果、それ以外は本文テキスト

        Raises:
            DressApiError: 再試行しても2xxが返らなかった場合
            requests.exceptions.RequestException: 通信に失敗した場合
        """
        url = f"{self.base_url}{endpoint}"
        method = method.upper()
        payload = body if (body is not None and method in self.BODY_METHODS) else None

        attempt = 0
        while True:
            try:
                response = self.session.request(method, url, json=payload, timeout=self.timeout)
                if not 200 <= response.status_code < 300:
                    raise DressApiError(response.status_code, response.reason or "")

                content_type = response.headers.get("Content-Type", "")
                if "application/json" in content_type:
                    return response.json()
                return response.text

            except requests.exceptions.Timeout:
                logger.error("API call timed out: %s %s", method, endpoint)
                raise
            except (DressApiError, requests.exceptions.RequestException) as e:
                logger.error("API call failed: %s %s: %s", method, endpoint, e)
                if attempt >= self.retry_attempts:
                    raise

                attempt += 1
                logger.info("Retrying API call... Attempt %d", attempt)
                time.sleep(self.retry_delay * attempt)

    def load_products(self, force_refresh: bool = False, variants: bool = False) -> dict[str, list[dict]]:
        """
        商品一覧を取得し、カテゴリごとにまとめて返す。

        Args:
            force_refresh: キャッシュを使わずに取得するか
            variants: バリエーション情報も取得するか

        Returns:
            dict[str, list[dict]]: カテゴリ → 商品リスト

        Raises:
            DressApiError: APIが2xx以外を返した場合（解析イベント送信後に再送出）
            requests.exceptions.RequestException: 通信に失敗した場合（同上）
        """
        cache_key = "products_enhanced_all" if variants else "products_all"
        endpoint = PRODUCTS_ENDPOINT + ("?variants=true&include_mockups=true" if variants else "")
        suffix = "_enhanced" if variants else ""

        data = None
        if self.enable_cache and not force_refresh:
            data = self.cache.get(cache_key)
        cached = data is not None

        if not cached:
            try:
                data = self.api_call(endpoint)
            except (DressApiError, requests.exceptions.RequestException) as e:
                logger.error("Error loading products: %s", e)
                self.track_event("products_error" + suffix, error=str(e))
                raise
            if self.enable_cache:
                self.cache.set(cache_key, data)
        grouped = group_products_by_category(data)
        if not cached:
            self.track_event("products_loaded" + suffix, count=sum(len(items) for items in grouped.values()))

        self.products = data
        return grouped

    def find_product(self, product_id) -> Optional[dict]:
        """
        最後に取得した商品一覧からIDで商品を探す。

        Args:
            product_id: 商品ID（文字列・数値どちらでも可）

        Returns:
            Optional[dict]: 商品（見つからなければNone）
        """
        for items in group_products_by_category(self.products).values():
            for item in items:
                product = item["product"]
                if str(product.get("id")) == str(product_id):
                    return product
        return None

    def submit_contact(self, form: dict) -> Any:
        """
        お問い合わせを送信する。

        Args:
            form: フォーム入力（name, email, subject, message）

        Returns:
            Any: APIのレスポンス

        Raises:
            ValueError: 入力に不備がある場合
            DressApiError: 送信に失敗した場合（解析イベント送信後に再送出）
            requests.exceptions.RequestException: 通信に失敗した場合（同上）
        """
        message = ContactMessage.from_dict(form)
        if message.missing_field():
            raise ValueError("Please fill in all required fields")
        if not message.has_valid_email():
            raise ValueError("Please enter a valid email address")

        try:
            result = self.api_call(CONTACT_ENDPOINT, "POST", message.to_dict())
        except (DressApiError, requests.exceptions.RequestException) as e:
            logger.error("Contact form error: %s", e)
            self.track_event("contact_submit", success=False, error=str(e))
            raise
        self.track_event("contact_submit", success=True)
        return result

    def track_event(self, event_type: str, **data) -> bool:
        """
        アクセス解析イベントを送信する。失敗しても例外は出さない。

        Args:
            event_type: イベント種別
            **data: 付加情報

        Returns:
            bool: 送信できたか
        """
        payload = {"type": event_type, "timestamp": int(time.time() * 1000)}
        payload.update(data)
        try:
            self.api_call(ANALYTICS_ENDPOINT, "POST", payload)
            return True
        except (DressApiError, requests.exceptions.RequestException) as e:
            logger.warning("Analytics tracking failed: %s", e)
            return False
