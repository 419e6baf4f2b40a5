"""
Printful APIクライアント

Printful REST APIへリクエストを転送し、レスポンスを受け取る。
認証・JSON変換・通信エラーの扱いを担当する。
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from config import Config

logger = logging.getLogger(__name__)


class PrintfulConnectionError(Exception):
    """Printfulに接続できなかった（タイムアウト・DNSエラーなど）"""


@dataclass
class PrintfulResponse:
    """Printful APIのレスポンス"""
    status_code: int
    data: Any
    url: str

    @property
    def ok(self) -> bool:
        """2xxかどうか"""
        return 200 <= self.status_code < 300

    @property
    def error_message(self) -> Any:
        """エラー時のメッセージ（error → result の順で参照）"""
        if isinstance(self.data, dict):
            return self.data.get("error") or self.data.get("result") or "Unknown error"
        return "Unknown error"


class PrintfulClient:
    """
    Printful APIとの通信を担当するクライアント

    主な機能:
    - Bearerトークン認証
    - 任意エンドポイントへの転送（GET/POST/PUT/PATCH/DELETE）
    - 商品詳細（バリエーション付き）の取得
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """
        クライアントを初期化する。

        Args:
            api_key: Printful APIキー（指定しない場合は環境変数から取得）
            base_url: APIのベースURL
            timeout: タイムアウト（秒）
        """
        self.api_key = api_key or Config.PRINTFUL_API_KEY
        if not self.api_key:
            raise ValueError("PRINTFUL_API_KEY is required")

        self.base_url = (base_url or Config.PRINTFUL_API_BASE).rstrip("/")
        self.timeout = timeout or Config.REQUEST_TIMEOUT

        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
            "User-Agent": Config.USER_AGENT,
        })

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def build_url(self, endpoint: str, query_string: str = "") -> str:
        """
        転送先URLを組み立てる。

        Args:
            endpoint: Printfulのエンドポイント（例: "/sync/products"）
            query_string: クエリ文字列（"?"付き・なしどちらでも可）

        Returns:
            str: 完全なURL
        """
        if not endpoint.startswith("/"):
            endpoint = "/" + endpoint
        if query_string and not query_string.startswith("?"):
            query_string = "?" + query_string
        return f"{self.base_url}{endpoint}{query_string}"

    def request(
        self,
        method: str,
        endpoint: str,
        query_string: str = "",
        body: Optional[str] = None,
    ) -> PrintfulResponse:
        """
        Printful APIにリクエストを送る。

        Args:
            method: HTTPメソッド
            endpoint: Printfulのエンドポイント
            query_string: クエリ文字列
            body: JSON文字列のリクエストボディ（POST/PUT/PATCHのみ）

        Returns:
            PrintfulResponse: ステータスとJSON（JSONでなければ {"data": 本文}）

        Raises:
            PrintfulConnectionError: 通信に失敗した場合
        """
        url = self.build_url(endpoint, query_string)
        headers = {}
        if body is not None:
            headers["Content-Type"] = "application/json"

        try:
            response = self.session.request(
                method.upper(),
                url,
                data=body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("Printful request failed: %s %s: %s", method, url, e)
            raise PrintfulConnectionError(str(e)) from e

        try:
            data = json.loads(response.text)
        except ValueError:
            data = {"data": response.text}

        return PrintfulResponse(status_code=response.status_code, data=data, url=url)

    def get_sync_product(self, product_id) -> PrintfulResponse:
        """
        商品の詳細（sync_product + sync_variants）を取得する。

        Args:
            product_id: sync productのID

        Returns:
            PrintfulResponse: 詳細レスポンス
        """
        return self.request("GET", f"/sync/products/{product_id}")

    def test_connection(self) -> tuple[bool, str]:
        """
        接続テストを行う（ストア情報を取得）。

        Returns:
            tuple[bool, str]: (成功したか, メッセージ)
        """
        try:
            response = self.request("GET", "/store")
        except PrintfulConnectionError as e:
            return False, f"Connection failed: {e}"

        if not response.ok:
            return False, f"Printful API error {response.status_code}: {response.error_message}"

        result = response.data.get("result") if isinstance(response.data, dict) else None
        name = result.get("name", "Unknown") if isinstance(result, dict) else "Unknown"
        return True, f"Connected to store: {name}"


# シングルトンインスタンス
_printful_client: Optional[PrintfulClient] = None


def get_printful_client() -> PrintfulClient:
    """PrintfulClientのシングルトンを取得する"""
    global _printful_client
    if _printful_client is None:
        _printful_client = PrintfulClient()
    return _printful_client


def reset_printful_client() -> None:
    """シングルトンを破棄する（APIキー変更時・テスト用）"""
    global _printful_client
    if _printful_client is not None:
        _printful_client.close()
    _printful_client = None
