"""
商品データモデル

Printful APIから受け取った商品情報を、フロントエンド向けに構造化して扱うためのデータクラスを定義する。
dataclassを使用することで、型ヒントと初期化を簡潔に書ける。
"""
import re
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_CURRENCY = "USD"
DEFAULT_CONTACT_SUBJECT = "Contact from DRESS website"

# メールアドレスの簡易チェック
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass
class VariantOption:
    """カラー・サイズなどの選択肢"""
    value: str
    display_value: str

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        return {"value": self.value, "display_value": self.display_value}


@dataclass
class ProductVariant:
    """
    商品バリエーション（Printfulのsync variant）

    サイズ・カラーの組み合わせごとに1件。
    """
    id: Optional[int]
    name: str = ""
    size: Optional[str] = None
    color: Optional[str] = None
    price: Optional[str] = None
    currency: str = DEFAULT_CURRENCY
    preview_url: Optional[str] = None   # プレビュー画像（モックアップ）

    @classmethod
    def from_printful(cls, data: dict) -> "ProductVariant":
        """Printfulのsync variantからインスタンスを生成"""
        preview_url = None
        for file_info in data.get("files") or []:
            if file_info.get("type") == "preview" and file_info.get("preview_url"):
                preview_url = file_info["preview_url"]
                break
        if preview_url is None:
            preview_url = (data.get("product") or {}).get("image")

        return cls(
            id=data.get("id"),
            name=data.get("name") or "",
            size=data.get("size"),
            color=data.get("color"),
            price=data.get("retail_price"),
            currency=data.get("currency") or DEFAULT_CURRENCY,
            preview_url=preview_url,
        )

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        return {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "color": self.color,
            "price": self.price,
            "currency": self.currency,
            "preview_url": self.preview_url,
        }


@dataclass
class StoreProduct:
    """
    フロントエンド向けの商品データ

    Printfulのsync productを整形したもの。
    バリエーションは詳細取得時のみ付与される（variantsがNoneなら未取得）。
    """
    id: Optional[int]
    name: Optional[str]
    thumbnail: Optional[str] = None
    store_url: Optional[str] = None       # 商品ページURL（未設定なら生成したURL）
    product_url: Optional[str] = None     # Printfulが返した商品ページURL
    price: Optional[str] = None
    currency: str = DEFAULT_CURRENCY
    tags: list[str] = field(default_factory=list)
    category: str = "other"
    status: Optional[str] = None

    # バリエーション情報
    variants: Optional[list[ProductVariant]] = None
    colors: list[VariantOption] = field(default_factory=list)
    sizes: list[VariantOption] = field(default_factory=list)
    main_image: Optional[str] = None

    @classmethod
    def from_printful(cls, data: dict, store_base_url: Optional[str] = None) -> "StoreProduct":
        """
        Printfulのsync productからインスタンスを生成する。

        Args:
            data: Printfulの商品データ
            store_base_url: 商品URLを生成する際のストアURL

        Returns:
            StoreProduct: 整形済みの商品
        """
        # 循環インポートを避けるため遅延インポート
        from core.catalog import generate_store_url, infer_category

        return cls(
            id=data.get("id"),
            name=data.get("name"),
            thumbnail=data.get("thumbnail_url"),
            store_url=data.get("store_url") or generate_store_url(data.get("name"), store_base_url),
            product_url=data.get("store_url"),
            price=data.get("retail_price") or data.get("price"),
            currency=data.get("currency") or DEFAULT_CURRENCY,
            tags=data.get("tags") or [],
            category=infer_category(data.get("name")),
            status=data.get("status"),
        )

    @property
    def has_variants(self) -> bool:
        """バリエーションが付与されているか"""
        return bool(self.variants)

    def attach_variants(self, variants: list[ProductVariant]) -> None:
        """
        バリエーションを付与し、カラー・サイズの選択肢とメイン画像を更新する。

        Args:
            variants: バリエーションのリスト
        """
        from core.catalog import extract_variant_options

        self.variants = variants
        self.colors, self.sizes = extract_variant_options(variants)
        self.main_image = next((v.preview_url for v in variants if v.preview_url), None) or self.thumbnail
        # 一覧APIは価格を返さないため、最初のバリエーションの価格で補う
        if self.price is None and variants:
            self.price = variants[0].price
            self.currency = variants[0].currency

    def to_dict(self) -> dict:
        """辞書形式に変換（JSON出力用）"""
        result = {
            "id": self.id,
            "name": self.name,
            "thumbnail": self.thumbnail,
            "store_url": self.store_url,
            "product_url": self.product_url,
            "price": self.price,
            "currency": self.currency,
            "tags": self.tags,
            "category": self.category,
            "status": self.status,
        }
        if self.variants is not None:
            result.update({
                "has_variants": self.has_variants,
                "variant_count": len(self.variants),
                "variants": [v.to_dict() for v in self.variants],
                "colors": [c.to_dict() for c in self.colors],
                "sizes": [s.to_dict() for s in self.sizes],
                "main_image": self.main_image,
            })
        return result


@dataclass
class StoreInfo:
    """ストア情報"""
    store_url: Optional[str]
    name: Optional[str] = None
    currency: Optional[str] = None

    @classmethod
    def from_printful(cls, data: dict) -> "StoreInfo":
        """Printfulのストア情報からインスタンスを生成"""
        return cls(
            store_url=data.get("website") or data.get("store_url"),
            name=data.get("name"),
            currency=data.get("currency"),
        )

    @property
    def products_url(self) -> str:
        """商品一覧ページのURL"""
        return f"{self.store_url}/products"

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        return {
            "store_url": self.store_url,
            "name": self.name,
            "currency": self.currency,
            "products_url": self.products_url,
        }


@dataclass
class ContactMessage:
    """お問い合わせフォームの入力"""
    name: str = ""
    email: str = ""
    message: str = ""
    subject: str = ""

    REQUIRED_FIELDS = ("name", "email", "message")

    @classmethod
    def from_dict(cls, data: dict) -> "ContactMessage":
        """辞書からインスタンスを生成（前後の空白は除去）"""
        def _text(key: str) -> str:
            value = data.get(key)
            return value.strip() if isinstance(value, str) else ""

        return cls(
            name=_text("name"),
            email=_text("email"),
            message=_text("message"),
            subject=_text("subject"),
        )

    def missing_field(self) -> Optional[str]:
        """
        未入力の必須項目を返す。

        Returns:
            Optional[str]: 最初に見つかった未入力項目名（すべて入力済みならNone）
        """
        for field_name in self.REQUIRED_FIELDS:
            if not getattr(self, field_name):
                return field_name
        return None

    def has_valid_email(self) -> bool:
        """メールアドレスの形式が正しいか"""
        return bool(EMAIL_PATTERN.match(self.email))

    def validate(self) -> Optional[str]:
        """
        入力内容をチェックする。

        Returns:
            Optional[str]: エラーメッセージ（問題なければNone）
        """
        missing = self.missing_field()
        if missing:
            return f"Missing required field: {missing}"
        if not self.has_valid_email():
            return "Invalid email format"
        return None

    def to_dict(self) -> dict:
        """辞書形式に変換（送信用）"""
        return {
            "name": self.name,
            "email": self.email,
            "subject": self.subject or DEFAULT_CONTACT_SUBJECT,
            "message": self.message,
        }


@dataclass
class AnalyticsEvent:
    """アクセス解析イベント"""
    type: Optional[str]
    category: Optional[str] = None
    timestamp: Optional[object] = None
    user_agent: Optional[str] = None
    ip: Optional[str] = None
    country: Optional[str] = None

    @classmethod
    def from_request(cls, data: dict, headers) -> "AnalyticsEvent":
        """
        リクエストボディとヘッダーからイベントを生成する。

        Args:
            data: リクエストボディ（JSON）
            headers: リクエストヘッダー

        Returns:
            AnalyticsEvent: 記録用のイベント
        """
        return cls(
            type=data.get("type"),
            category=data.get("category"),
            timestamp=data.get("timestamp"),
            user_agent=headers.get("User-Agent"),
            ip=headers.get("CF-Connecting-IP"),
            country=headers.get("CF-IPCountry"),
        )

    def to_dict(self) -> dict:
        """辞書形式に変換"""
        return {
            "type": self.type,
            "category": self.category,
            "timestamp": self.timestamp,
            "userAgent": self.user_agent,
            "ip": self.ip,
            "country": self.country,
        }
