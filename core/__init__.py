"""
コアロジックパッケージ

Printful APIへの転送・レスポンス整形・キャッシュ・レート制限などの主要なロジックを提供する。
"""
from core.cache import ResponseCache, build_cache_key, response_cache
from core.catalog import (
    format_price,
    group_products_by_category,
    infer_category,
    normalize_category,
    process_printful_response,
)
from core.cors import get_cors_headers
from core.endpoint_mapper import map_endpoint
from core.log_config import setup_logging
from core.printful_proxy import PrintfulProxy, ProxyResult
from core.rate_limiter import RateLimiter, RateLimitResult, get_client_id, rate_limiter

__all__ = [
    "ResponseCache",
    "build_cache_key",
    "response_cache",
    "format_price",
    "group_products_by_category",
    "infer_category",
    "normalize_category",
    "process_printful_response",
    "get_cors_headers",
    "map_endpoint",
    "setup_logging",
    "PrintfulProxy",
    "ProxyResult",
    "RateLimiter",
    "RateLimitResult",
    "get_client_id",
    "rate_limiter",
]
