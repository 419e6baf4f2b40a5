"""
商品カタログ整形モジュール

Printful APIのレスポンスをフロントエンドで扱いやすい形に整形する。
カテゴリ推定・カテゴリ正規化・カテゴリ絞り込み・価格表示もここで扱う。
"""
import re
from typing import Iterable, Mapping, Optional

from config import Config
from models.product import ProductVariant, StoreInfo, StoreProduct, VariantOption

DEFAULT_CATEGORY = "other"

# 商品名から推定するカテゴリ（上から順に判定）
CATEGORY_KEYWORDS = [
    ("t-shirts", ("t-shirt", "tee")),
    ("hoodies", ("hoodie", "sweatshirt")),
    ("caps", ("cap", "hat", "beanie")),
    ("other", ("mug", "bottle", "tumbler")),
    ("accessories", ("bag", "tote", "backpack")),
]

# 表記ゆれ → 標準カテゴリ
CATEGORY_ALIASES = {
    "tshirt": "t-shirts",
    "tshirts": "t-shirts",
    "t-shirt": "t-shirts",
    "tee": "t-shirts",
    "tees": "t-shirts",
    "hoodie": "hoodies",
    "sweatshirt": "hoodies",
    "sweatshirts": "hoodies",
    "cap": "caps",
    "hat": "caps",
    "hats": "caps",
    "beanie": "caps",
    "accessory": "accessories",
    "mug": "other",
    "mugs": "other",
    "bottle": "other",
    "bag": "accessories",
    "bags": "accessories",
}

CATEGORY_LABELS = {
    "all": "All Products",
    "t-shirts": "T-Shirts",
    "hoodies": "Hoodies",
    "caps": "Caps",
    "accessories": "Accessories",
    "other": "Other Products",
}

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "CAD": "C$",
    "AUD": "A$",
}

PRICE_UNAVAILABLE = "Contact for price"


def infer_category(name: Optional[str]) -> str:
    """
    商品名からカテゴリを推定する。

    Args:
        name: 商品名

    Returns:
        str: カテゴリ（判定できなければ "other"）
    """
    lowered = (name or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def normalize_category(category: Optional[str]) -> str:
    """
    カテゴリの表記ゆれを標準カテゴリにそろえる。

    Args:
        category: カテゴリ文字列

    Returns:
        str: 標準カテゴリ（未知の値は小文字化して返す）
    """
    if not category:
        return DEFAULT_CATEGORY
    normalized = category.lower().strip()
    return CATEGORY_ALIASES.get(normalized, normalized)


def format_category_name(category: str) -> str:
    """カテゴリの表示名を取得する"""
    if category in CATEGORY_LABELS:
        return CATEGORY_LABELS[category]
    return category[:1].upper() + category[1:].replace("-", " ")


def generate_store_url(name: Optional[str], store_base_url: Optional[str] = None) -> str:
    """
    Printfulが商品URLを返さない場合の商品ページURLを生成する。

    Args:
        name: 商品名
        store_base_url: ストアのURL（省略時は設定値）

    Returns:
        str: 商品ページURL
    """
    base = store_base_url or Config.STORE_BASE_URL
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()) if name else "product"
    return f"{base}/products/{slug}"


def filter_by_category(products: list[dict], category: Optional[str]) -> list[dict]:
    """
    商品名またはタグにカテゴリ名を含む商品だけを残す。

    Args:
        products: Printfulの商品リスト
        category: カテゴリ（空なら絞り込みなし）

    Returns:
        list[dict]: 絞り込み後の商品リスト
    """
    if not category:
        return list(products)

    needle = category.lower()
    filtered = []
    for product in products:
        product_name = (product.get("name") or "").lower()
        product_tags = " ".join(product.get("tags") or []).lower()
        if needle in product_name or needle in product_tags:
            filtered.append(product)
    return filtered


def extract_variant_options(variants: Iterable[ProductVariant]) -> tuple[list[VariantOption], list[VariantOption]]:
    """
    バリエーションからカラー・サイズの選択肢を重複なしで抽出する。

    Returns:
        tuple: (カラー一覧, サイズ一覧)（出現順）
    """
    colors: dict[str, VariantOption] = {}
    sizes: dict[str, VariantOption] = {}
    for variant in variants:
        if variant.color and variant.color not in colors:
            colors[variant.color] = VariantOption(value=variant.color, display_value=variant.color)
        if variant.size and variant.size not in sizes:
            sizes[variant.size] = VariantOption(value=variant.size, display_value=variant.size)
    return list(colors.values()), list(sizes.values())


def build_product_detail(result: dict, store_base_url: Optional[str] = None) -> StoreProduct:
    """
    sync productの詳細レスポンス（sync_product + sync_variants）から商品を組み立てる。

    Args:
        result: Printfulの詳細レスポンスのresult
        store_base_url: 商品URLを生成する際のストアURL

    Returns:
        StoreProduct: バリエーション付きの商品
    """
    product = StoreProduct.from_printful(result.get("sync_product") or {}, store_base_url=store_base_url)
    variants = [ProductVariant.from_printful(v) for v in result.get("sync_variants") or []]
    product.attach_variants(variants)
    return product


def process_printful_response(data, endpoint: str, params: Optional[Mapping] = None):
    """
    Printfulのレスポンスをフロントエンド向けに整形する。

    - 商品一覧: カテゴリで絞り込み、1件なら直接リダイレクト用の形式で返す
    - 商品詳細: バリエーション付きの商品を返す
    - ストア情報: ストアURLと商品一覧URLを返す
    - その他: そのまま返す

    Args:
        data: Printfulのレスポンス（JSON）
        endpoint: 変換後のPrintfulエンドポイント
        params: リクエストのクエリパラメータ

    Returns:
        整形済みのレスポンス
    """
    params = params or {}
    category = params.get("category") or None
    result = data.get("result") if isinstance(data, dict) else None

    if "/sync/products" in endpoint and result:
        if isinstance(result, dict) and "sync_product" in result:
            return {"product": build_product_detail(result).to_dict()}

        products = result if isinstance(result, list) else [result]
        filtered = filter_by_category(products, category)
        transformed = [StoreProduct.from_printful(p) for p in filtered]

        # 1件だけなら商品ページへ直接遷移できる形式で返す
        if len(transformed) == 1:
            return {
                "redirectUrl": transformed[0].store_url,
                "product": transformed[0].to_dict(),
            }

        return {
            "products": [p.to_dict() for p in transformed],
            "total": len(transformed),
            "category": category,
        }

    if "/store" in endpoint and result:
        return StoreInfo.from_printful(result).to_dict()

    return data


def _extract_product_list(data) -> list:
    """レスポンス形式の違いを吸収して商品リストを取り出す"""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if isinstance(data.get("products"), list):
            return data["products"]
        if isinstance(data.get("result"), list):
            return data["result"]
        if isinstance(data.get("product"), dict):
            return [data]
    return []


def group_products_by_category(data) -> dict[str, list[dict]]:
    """
    商品をカテゴリごとにまとめる（カテゴリは初出順）。

    Args:
        data: 商品リスト、または {"products": [...]} / {"result": [...]} 形式のレスポンス

    Returns:
        dict[str, list[dict]]: カテゴリ → {"product": 商品, "redirectUrl": URL} のリスト
    """
    grouped: dict[str, list[dict]] = {}

    for item in _extract_product_list(data):
        product = item.get("product") or item
        category = normalize_category(product.get("category") or infer_category(product.get("name")))

        normalized = dict(product)
        normalized.update({
            "id": product.get("id"),
            "name": product.get("name") or "Unnamed Product",
            "thumbnail": product.get("thumbnail") or product.get("thumbnail_url") or product.get("image_url"),
            "store_url": product.get("store_url") or product.get("product_url") or "#",
            "price": product.get("price") or product.get("retail_price"),
            "currency": product.get("currency") or "USD",
            "category": category,
            "status": product.get("status") or "active",
        })

        grouped.setdefault(category, []).append({
            "product": normalized,
            "redirectUrl": item.get("redirectUrl") or product.get("store_url") or product.get("product_url"),
        })

    return grouped


def format_price(price, currency: Optional[str] = "USD") -> str:
    """
    価格を通貨記号付きで表示用にフォーマットする。

    Args:
        price: 価格（文字列または数値）
        currency: 通貨コード

    Returns:
        str: 例 "$24.99"（価格不明なら "Contact for price"）
    """
    if price is None or isinstance(price, bool):
        return PRICE_UNAVAILABLE

    try:
        amount = float(price)
    except (TypeError, ValueError):
        return PRICE_UNAVAILABLE
    if amount != amount:  # NaN
        return PRICE_UNAVAILABLE

    currency = currency or "USD"
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{symbol}{amount:.2f}"
