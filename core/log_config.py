"""
ログ設定

アプリケーション全体のログ出力を設定する。
出力先は標準エラー。
"""
import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

# setup_logging が追加したハンドラー
_handler: Optional[logging.Handler] = None


def setup_logging(level: Union[str, int] = "INFO") -> logging.Handler:
    """
    ルートロガーを設定する。

    複数回呼んでもハンドラーは1つだけになる（前回追加したものを差し替える）。

    Args:
        level: ログレベル（"DEBUG" / "INFO" / "WARNING" など）

    Returns:
        logging.Handler: 追加したハンドラー
    """
    global _handler

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)

    if _handler is not None:
        root.removeHandler(_handler)
    _handler = handler
    root.addHandler(handler)
    return handler
