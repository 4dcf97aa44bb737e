# services/html_parser.py

from __future__ import annotations

import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from models.site_models import PageContent, PageMeta
from services.question_detector import PAGE_QUESTION_MIN_LENGTH, detect_questions

logger = logging.getLogger(__name__)

# 本文テキストは先頭だけ使う
MAX_CONTENT_CHARS = 5000


def _clean(value: Optional[str]) -> Optional[str]:
    """前後の空白を落とし、空文字は None にする。"""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _meta_content(soup: BeautifulSoup, **attrs: str) -> Optional[str]:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return None
    content = tag.get("content")
    return _clean(content if isinstance(content, str) else None)


def _extract_meta(soup: BeautifulSoup) -> PageMeta:
    title = _clean(soup.title.get_text()) if soup.title else None

    canonical = None
    link = soup.find("link", rel="canonical")
    if link is not None:
        href = link.get("href")
        canonical = _clean(href if isinstance(href, str) else None)

    return PageMeta(
        title=title,
        description=_meta_content(soup, name="description"),
        keywords=_meta_content(soup, name="keywords"),
        og_title=_meta_content(soup, property="og:title"),
        og_description=_meta_content(soup, property="og:description"),
        canonical=canonical,
    )


def _extract_headings(soup: BeautifulSoup) -> List[str]:
    """h1〜h3 のテキストを文書順に集める（空のものは除外）。"""
    headings: List[str] = []
    for tag in soup.find_all(["h1", "h2", "h3"]):
        text = re.sub(r"\s+", " ", tag.get_text(separator=" ")).strip()
        if text:
            headings.append(text)
    return headings


def _extract_main_text(soup: BeautifulSoup) -> str:
    """script/style 等を除去して本文テキストを抽出する。"""
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    root = soup.body or soup
    text = root.get_text(separator=" ")
    text = re.sub(r"\s+", " ", text).strip()
    return text[:MAX_CONTENT_CHARS]


def parse_html(html: str) -> PageContent:
    """
    HTML文字列を解析して PageContent を生成する。
    ※ ネットワークアクセスは行わない（fetch_html で取得済み前提）
    ※ 壊れた HTML でも例外は投げず、取れたものだけ返す
    """
    soup = BeautifulSoup(html or "", "html.parser")

    meta = _extract_meta(soup)
    # meta / 見出しを先に取る（_extract_main_text は soup を破壊する）
    headings = _extract_headings(soup)
    content_text = _extract_main_text(soup)
    page_questions = detect_questions(content_text, min_length=PAGE_QUESTION_MIN_LENGTH)

    logger.info(
        "[html_parser] title=%s headings=%s content_chars=%s page_questions=%s",
        meta.title,
        len(headings),
        len(content_text),
        len(page_questions),
    )

    return PageContent(
        meta=meta,
        headings=headings,
        content_text=content_text,
        page_questions=page_questions,
    )
