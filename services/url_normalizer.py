# services/url_normalizer.py

from __future__ import annotations

import logging
from urllib.parse import unquote_plus, urlsplit, urlunsplit

logger = logging.getLogger(__name__)


def _strip_tracking_params(query: str) -> str:
    """utm_ で始まるキーのパラメータだけ落とす（他はエンコードもそのまま）。"""
    if not query:
        return ""
    kept = []
    for pair in query.split("&"):
        if not pair:
            continue
        key = unquote_plus(pair.split("=", 1)[0])
        if key.startswith("utm_"):
            continue
        kept.append(pair)
    return "&".join(kept)


def normalize_url(url: str) -> str:
    """
    キャッシュキー用に URL を正規化する。
    - スキームは https に統一
    - 先頭の www. を除去
    - utm_ パラメータを除去
    - 末尾のスラッシュを除去（ルートパスは除く）
    パースできない URL はそのまま返す。
    """
    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname
        port = parts.port
    except ValueError:
        logger.info("[url_normalizer] unparsable url, keep as is: %s", url)
        return url

    if not parts.scheme or not hostname:
        logger.info("[url_normalizer] not an absolute url, keep as is: %s", url)
        return url

    if hostname.startswith("www."):
        hostname = hostname[len("www."):]
    # IPv6 リテラルは角括弧を戻す
    if ":" in hostname:
        hostname = f"[{hostname}]"

    # http の 80 / https の 443 はデフォルトポートなので落とす
    default_port = port == 443 or (parts.scheme == "http" and port == 80)

    netloc = hostname
    if port is not None and not default_port:
        netloc = f"{netloc}:{port}"
    if parts.username:
        userinfo = parts.username
        if parts.password:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"

    path = parts.path or "/"
    if path != "/" and path.endswith("/"):
        path = path[:-1]

    normalized = urlunsplit(
        ("https", netloc, path, _strip_tracking_params(parts.query), parts.fragment)
    )

    if normalized.endswith("/") and path != "/":
        normalized = normalized[:-1]

    return normalized
