"""
設定・環境変数管理

このファイルは環境変数を読み込み、アプリケーション全体で使う設定値を提供する。
他のモジュールから `from config import Config` でインポートして使用する。
"""
import os
from dotenv import load_dotenv

# .envファイルを読み込む
load_dotenv()


DEFAULT_ALLOWED_ORIGINS = ",".join([
    "https://dress-custom-apparel.pages.dev",  # Cloudflare Pages
    "https://dress.example.com",               # カスタムドメイン
    "http://localhost:3000",                   # ローカル開発用
    "http://127.0.0.1:3000",
])


class Config:
    """アプリケーション設定クラス"""

    # Printful API設定
    PRINTFUL_API_KEY: str = os.getenv("PRINTFUL_API_KEY", "")
    PRINTFUL_API_BASE: str = os.getenv("PRINTFUL_API_BASE", "https://api.printful.com")
    USER_AGENT: str = os.getenv("USER_AGENT", "DRESS-Website/1.0")
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "15"))  # 秒

    # ストア設定（Printfulが商品URLを返さない場合に使用）
    STORE_BASE_URL: str = os.getenv("STORE_BASE_URL", "https://dress-custom-apparel.printful.me")

    # CORS設定（カンマ区切り）
    ALLOWED_ORIGINS: str = os.getenv("ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS)

    # キャッシュ設定
    CACHE_TTL_SECONDS: int = int(os.getenv("CACHE_TTL_SECONDS", "300"))  # 5分

    # レート制限設定
    RATE_LIMIT_MAX_REQUESTS: int = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))
    RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))  # 1分

    # ログ設定
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    APP_VERSION: str = os.getenv("APP_VERSION", "2.0.0")

    @classmethod
    def validate(cls) -> list[str]:
        """
        必須の環境変数が設定されているかチェックする。

        Returns:
            list[str]: 未設定の環境変数名のリスト（空なら問題なし）
        """
        errors = []
        if not cls.PRINTFUL_API_KEY:
            errors.append("PRINTFUL_API_KEY")
        return errors

    @classmethod
    def get_allowed_origins(cls) -> list[str]:
        """
        許可するオリジンの一覧を取得する。

        Returns:
            list[str]: オリジンのリスト（設定順）
        """
        return [origin.strip() for origin in cls.ALLOWED_ORIGINS.split(",") if origin.strip()]
