"""
外部サービス連携パッケージ

Printful APIとの通信、およびストアフロントAPIの呼び出しを担当する。
"""
from integrations.printful_client import (
    PrintfulClient,
    PrintfulConnectionError,
    PrintfulResponse,
    get_printful_client,
)
from integrations.storefront_client import DressApiClient, DressApiError

__all__ = [
    "PrintfulClient",
    "PrintfulConnectionError",
    "PrintfulResponse",
    "get_printful_client",
    "DressApiClient",
    "DressApiError",
]
