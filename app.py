"""
DRESS Printful プロキシ - Flaskアプリケーション

サイトのフロントエンドからのAPIリクエストを受け取り、Printful APIへ転送する。
お問い合わせフォームとアクセス解析イベントの受付も担当する。

使用法:
    開発環境: python app.py
    本番環境: gunicorn app:app
"""
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent))

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from config import Config
from core.cache import response_cache
from core.cors import get_cors_headers
from core.log_config import setup_logging
from core.printful_proxy import PrintfulProxy, missing_api_key_result
from core.rate_limiter import get_client_id, rate_limiter
from integrations.printful_client import get_printful_client
from models.product import AnalyticsEvent, ContactMessage

setup_logging(Config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Flaskアプリケーション
app = Flask(__name__)

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def _now_iso() -> str:
    """現在時刻（UTC、ISO 8601形式）"""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _text_response(text: str, status: int) -> Response:
    """プレーンテキストのレスポンスを作る"""
    return Response(text, status=status, mimetype="text/plain")


@app.before_request
def check_preflight_and_rate_limit():
    """CORSプリフライトへの応答とレート制限"""
    if request.method == "OPTIONS":
        return Response(status=200)

    result = rate_limiter.check(get_client_id(request.headers, request.remote_addr))
    g.rate_limit_remaining = result.remaining
    if not result.allowed:
        return _text_response("Rate limit exceeded", 429)
    return None


@app.after_request
def add_cors_headers(response: Response) -> Response:
    """すべてのレスポンスにCORSヘッダーを付与する"""
    origin = request.headers.get("Origin")
    for name, value in get_cors_headers(origin, Config.get_allowed_origins()).items():
        response.headers[name] = value

    remaining = g.get("rate_limit_remaining")
    if remaining is not None and response.status_code != 429:
        response.headers["X-RateLimit-Remaining"] = str(remaining)
    return response


@app.errorhandler(Exception)
def handle_unexpected_error(error):
    """想定外のエラーをJSONで返す"""
    if isinstance(error, HTTPException):
        return error

    logger.exception("API Error: %s", error)
    return jsonify({
        "error": "Internal server error",
        "message": str(error),
    }), 500


@app.route("/")
def index():
    """稼働確認用エンドポイント"""
    return "DRESS API proxy is running!"


@app.route("/api/health")
def health_check():
    """ヘルスチェック用エンドポイント"""
    return jsonify({
        "status": "healthy",
        "timestamp": _now_iso(),
        "version": Config.APP_VERSION,
        "services": {
            "printful": bool(Config.PRINTFUL_API_KEY),
            "cache": len(response_cache),
            "rateLimit": len(rate_limiter),
        },
    })


@app.route("/api/printful", defaults={"subpath": ""}, methods=ALL_METHODS)
@app.route("/api/printful/", endpoint="printful_api_root", defaults={"subpath": ""}, methods=ALL_METHODS)
@app.route("/api/printful/<path:subpath>", methods=ALL_METHODS)
def printful_api(subpath: str):
    """Printful APIへの転送エンドポイント"""
    if not Config.PRINTFUL_API_KEY:
        result = missing_api_key_result()
    else:
        proxy = PrintfulProxy(get_printful_client(), response_cache)
        result = proxy.handle(
            method=request.method,
            path="/" + subpath if subpath else "/",
            query_string=request.query_string.decode("utf-8"),
            params=request.args,
            content_type=request.headers.get("Content-Type", ""),
            body=request.get_data(as_text=True),
        )

    response = Response(result.body, status=result.status_code, mimetype="application/json")
    if result.cache_status:
        response.headers["X-Cache"] = result.cache_status
    return response


@app.route("/api/contact", methods=ALL_METHODS)
def contact_form():
    """お問い合わせフォームの受付"""
    if request.method != "POST":
        return _text_response("Method not allowed", 405)

    try:
        data = request.get_json(force=True)
        if not isinstance(data, dict):
            raise ValueError("Request body must be a JSON object")

        message = ContactMessage.from_dict(data)

        # 必須項目のチェック
        missing = message.missing_field()
        if missing:
            return jsonify({"error": "Missing required field", "field": missing}), 400

        # メールアドレス形式のチェック
        if not message.has_valid_email():
            return jsonify({"error": "Invalid email format"}), 400

        # TODO: SendGrid等のメール送信サービスと連携する（現状はログ出力のみ）
        submission = message.to_dict()
        logger.info(
            "Contact form submission: name=%s email=%s subject=%s timestamp=%s",
            submission["name"], submission["email"], submission["subject"], _now_iso(),
        )

        return jsonify({
            "success": True,
            "message": "Thank you for your message! We'll get back to you soon.",
            "timestamp": _now_iso(),
        })

    except Exception as e:
        logger.error("Contact form error: %s", e)
        return jsonify({"error": "Failed to process contact form", "message": str(e)}), 500


@app.route("/api/analytics", methods=ALL_METHODS)
def analytics():
    """アクセス解析イベントの受付（ログ出力のみ）"""
    if request.method != "POST":
        return _text_response("Method not allowed", 405)

    try:
        data = request.get_json(force=True)
        # オブジェクト以外（配列など）は項目なしのイベントとして記録する
        if not isinstance(data, dict):
            data = {}

        event = AnalyticsEvent.from_request(data, request.headers)
        logger.info("Analytics event: %s", event.to_dict())

        return jsonify({"success": True, "message": "Analytics event recorded"})

    except Exception as e:
        logger.error("Analytics error: %s", e)
        return jsonify({"error": "Failed to record analytics", "message": str(e)}), 500


@app.route("/api/<path:unknown>", methods=ALL_METHODS)
def api_not_found(unknown: str):
    """未定義のAPIエンドポイント"""
    return _text_response("API endpoint not found", 404)


if __name__ == "__main__":
    # 設定をチェック
    errors = Config.validate()
    if errors:
        logger.warning("Missing environment variables: %s", ", ".join(errors))

    # 開発サーバーを起動
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=True)
