"""
CORSヘッダー生成
"""
from typing import Optional

ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization, X-Requested-With"
MAX_AGE = "86400"  # 24時間


def get_cors_headers(origin: Optional[str], allowed_origins: list[str]) -> dict[str, str]:
    """
    CORSレスポンスヘッダーを生成する。

    許可リストにあるオリジンはそのまま返し、それ以外はリストの先頭を返す。

    Args:
        origin: リクエストのOriginヘッダー
        allowed_origins: 許可するオリジンのリスト

    Returns:
        dict[str, str]: レスポンスに付与するヘッダー
    """
    if origin and origin in allowed_origins:
        allowed_origin = origin
    else:
        allowed_origin = allowed_origins[0] if allowed_origins else "*"

    return {
        "Access-Control-Allow-Origin": allowed_origin,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Max-Age": MAX_AGE,
        "Access-Control-Allow-Credentials": "true",
    }
