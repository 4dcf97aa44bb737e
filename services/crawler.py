# services/crawler.py

import logging
from typing import Optional

import requests

from app.config import settings
from services.errors import FetchError

logger = logging.getLogger(__name__)


def fetch_html(url: str, timeout: Optional[float] = None) -> str:
    """
    単純な GET だけのクロール。リトライは入れていない。
    失敗（通信エラー / 2xx 以外）はすべて FetchError にまとめる。
    """
    headers = {
        "User-Agent": settings.user_agent,
    }
    timeout = timeout if timeout is not None else settings.fetch_timeout

    logger.info("[crawler] GET %s timeout=%s", url, timeout)
    try:
        resp = requests.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        logger.warning("[crawler] request failed: %s (%s)", url, e)
        raise FetchError(url, str(e)) from e

    if not resp.ok:
        logger.warning("[crawler] non-2xx status: %s %s", resp.status_code, url)
        raise FetchError(
            url,
            f"{resp.status_code} {resp.reason}",
            status_code=resp.status_code,
        )

    logger.info("[crawler] fetched %s length=%s", url, len(resp.text))
    return resp.text
