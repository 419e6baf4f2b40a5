"""
商品カタログ整形のテスト

カテゴリ推定・正規化、URL生成、Printfulレスポンスの整形をテストする。
"""
import sys
from pathlib import Path

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import Config
from core.catalog import (
    extract_variant_options,
    filter_by_category,
    format_category_name,
    format_price,
    generate_store_url,
    group_products_by_category,
    infer_category,
    normalize_category,
    process_printful_response,
)
from models.product import ProductVariant


def _sync_product(product_id, name, **extra):
    """テスト用のsync product"""
    data = {"id": product_id, "name": name, "thumbnail_url": f"https://img.example/{product_id}.png", "variants": 3}
    data.update(extra)
    return data


def test_infer_category():
    """商品名からのカテゴリ推定"""
    test_cases = [
        ("Classic Tee", "t-shirts"),
        ("Unisex T-Shirt", "t-shirts"),
        ("Unisex Heavy Blend Hoodie", "hoodies"),
        ("Crewneck Sweatshirt", "hoodies"),
        ("Embroidered Dad Hat", "caps"),
        ("Cuffed Beanie", "caps"),
        ("Coffee Mug", "other"),
        ("Stainless Water Bottle", "other"),
        ("Canvas Tote", "accessories"),
        ("Minimalist Backpack", "accessories"),
        ("Poster", "other"),
        ("", "other"),
        (None, "other"),
    ]

    for name, expected in test_cases:
        result = infer_category(name)
        assert result == expected, f"'{name}': 期待値{expected}, 実際{result}"


def test_normalize_category():
    """カテゴリの表記ゆれ"""
    test_cases = [
        ("Tees", "t-shirts"),
        ("tshirt", "t-shirts"),
        (" HAT ", "caps"),
        ("sweatshirts", "hoodies"),
        ("bags", "accessories"),
        ("mug", "other"),
        ("hoodies", "hoodies"),
        ("Posters", "posters"),
        ("", "other"),
        (None, "other"),
    ]

    for category, expected in test_cases:
        result = normalize_category(category)
        assert result == expected, f"'{category}': 期待値{expected}, 実際{result}"


def test_format_category_name():
    """カテゴリの表示名"""
    assert format_category_name("t-shirts") == "T-Shirts"
    assert format_category_name("all") == "All Products"
    assert format_category_name("wall-art") == "Wall art"


def test_generate_store_url():
    """商品URLの生成"""
    base = "https://shop.example"
    assert generate_store_url("Classic Tee - Black", base) == "https://shop.example/products/classic-tee-black"
    assert generate_store_url(None, base) == "https://shop.example/products/product"
    assert generate_store_url("Mug", None) == f"{Config.STORE_BASE_URL}/products/mug"


def test_filter_by_category_matches_name_and_tags():
    """名前・タグでの絞り込み（大文字小文字を区別しない）"""
    products = [
        {"name": "Classic Tee", "tags": []},
        {"name": "Logo Hoodie", "tags": ["Winter"]},
        {"name": "Coffee Mug", "tags": ["Hoodies-bundle"]},
    ]

    result = filter_by_category(products, "HOODIE")
    assert [p["name"] for p in result] == ["Logo Hoodie", "Coffee Mug"]

    assert filter_by_category(products, None) == products


def test_process_product_list():
    """商品一覧の整形"""
    data = {"code": 200, "result": [_sync_product(1, "Classic Tee"), _sync_product(2, "Logo Hoodie")]}

    result = process_printful_response(data, "/sync/products", {})

    assert result["total"] == 2
    assert result["category"] is None
    first = result["products"][0]
    assert first["id"] == 1
    assert first["thumbnail"] == "https://img.example/1.png"
    assert first["store_url"] == f"{Config.STORE_BASE_URL}/products/classic-tee"
    assert first["product_url"] is None
    assert first["currency"] == "USD"
    assert first["tags"] == []
    assert first["category"] == "t-shirts"
    assert "variants" not in first
    assert result["products"][1]["category"] == "hoodies"


def test_process_product_list_single_match_returns_redirect():
    """絞り込みの結果1件ならリダイレクト形式"""
    data = {"result": [
        _sync_product(1, "Classic Tee"),
        _sync_product(2, "Logo Hoodie", store_url="https://shop.example/hoodie", retail_price="39.00"),
    ]}

    result = process_printful_response(data, "/sync/products", {"category": "hoodie"})

    assert result["redirectUrl"] == "https://shop.example/hoodie"
    assert result["product"]["id"] == 2
    assert result["product"]["product_url"] == "https://shop.example/hoodie"
    assert result["product"]["price"] == "39.00"


def test_process_product_list_no_match():
    """一致なしは空の一覧"""
    data = {"result": [_sync_product(1, "Classic Tee")]}

    result = process_printful_response(data, "/sync/products", {"category": "caps"})

    assert result == {"products": [], "total": 0, "category": "caps"}


def test_process_product_detail_with_variants():
    """商品詳細はバリエーション付き"""
    data = {"result": {
        "sync_product": _sync_product(7, "Classic Tee"),
        "sync_variants": [
            {"id": 71, "name": "Classic Tee / S", "size": "S", "color": "Black", "retail_price": "25.00",
             "currency": "USD", "files": [{"type": "default"}, {"type": "preview", "preview_url": "https://img.example/71.png"}]},
            {"id": 72, "name": "Classic Tee / M", "size": "M", "color": "Black", "retail_price": "25.00",
             "currency": "USD", "files": []},
            {"id": 73, "name": "Classic Tee / M", "size": "M", "color": "White", "retail_price": "26.00",
             "currency": "USD", "product": {"image": "https://img.example/base.png"}},
        ],
    }}

    result = process_printful_response(data, "/sync/products/7", {})
    product = result["product"]

    assert product["has_variants"] is True
    assert product["variant_count"] == 3
    assert product["price"] == "25.00"
    assert product["main_image"] == "https://img.example/71.png"
    assert [c["value"] for c in product["colors"]] == ["Black", "White"]
    assert [s["value"] for s in product["sizes"]] == ["S", "M"]
    assert product["variants"][2]["preview_url"] == "https://img.example/base.png"


def test_process_store_info():
    """ストア情報の整形"""
    data = {"result": {"id": 1, "name": "DRESS", "website": "https://dress.example.com", "currency": "EUR"}}

    result = process_printful_response(data, "/store", {})

    assert result == {
        "store_url": "https://dress.example.com",
        "name": "DRESS",
        "currency": "EUR",
        "products_url": "https://dress.example.com/products",
    }


def test_process_other_endpoints_pass_through():
    """その他のエンドポイントはそのまま"""
    data = {"code": 200, "result": [{"id": 1, "status": "draft"}]}
    assert process_printful_response(data, "/orders", {}) is data

    # 空の一覧も加工しない
    empty = {"code": 200, "result": []}
    assert process_printful_response(empty, "/sync/products", {}) is empty


def test_group_products_by_category():
    """カテゴリごとのグループ化（初出順）"""
    data = {"products": [
        {"id": 1, "name": "Classic Tee", "category": "t-shirts", "store_url": "https://shop.example/1"},
        {"id": 2, "name": "Dad Hat"},
        {"id": 3, "name": "Pocket Tee", "category": "Tees", "price": "20.00"},
    ]}

    grouped = group_products_by_category(data)

    assert list(grouped.keys()) == ["t-shirts", "caps"]
    assert [item["product"]["id"] for item in grouped["t-shirts"]] == [1, 3]
    assert grouped["t-shirts"][0]["redirectUrl"] == "https://shop.example/1"
    assert grouped["caps"][0]["product"]["store_url"] == "#"
    assert grouped["caps"][0]["product"]["status"] == "active"


def test_group_products_handles_redirect_shape_and_empty():
    """単一商品のリダイレクト形式・空データ"""
    data = {"redirectUrl": "https://shop.example/hoodie", "product": {"id": 2, "name": "Logo Hoodie"}}

    grouped = group_products_by_category(data)

    assert grouped["hoodies"][0]["redirectUrl"] == "https://shop.example/hoodie"
    assert group_products_by_category(None) == {}
    assert group_products_by_category([]) == {}


def test_extract_variant_options():
    """カラー・サイズの重複除去"""
    variants = [
        ProductVariant(id=1, size="S", color="Navy"),
        ProductVariant(id=2, size="M", color="Navy"),
        ProductVariant(id=3, size="S", color=None),
    ]

    colors, sizes = extract_variant_options(variants)

    assert [c.value for c in colors] == ["Navy"]
    assert [s.value for s in sizes] == ["S", "M"]


def test_format_price():
    """価格表示"""
    test_cases = [
        (("24.99", "USD"), "$24.99"),
        ((10, "EUR"), "€10.00"),
        ((5, "GBP"), "£5.00"),
        (("7.5", "CAD"), "C$7.50"),
        ((5, "JPY"), "JPY5.00"),
        (("12", None), "$12.00"),
        ((None, "USD"), "Contact for price"),
        (("abc", "USD"), "Contact for price"),
    ]

    for (price, currency), expected in test_cases:
        result = format_price(price, currency)
        assert result == expected, f"{price} {currency}: 期待値{expected}, 実際{result}"
