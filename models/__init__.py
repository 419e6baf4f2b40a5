"""
データモデルパッケージ

Printful商品・ストア情報・お問い合わせなどのデータ構造を定義する。
"""
from models.product import (
    StoreProduct,
    ProductVariant,
    VariantOption,
    StoreInfo,
    ContactMessage,
    AnalyticsEvent,
)

__all__ = [
    "StoreProduct",
    "ProductVariant",
    "VariantOption",
    "StoreInfo",
    "ContactMessage",
    "AnalyticsEvent",
]
