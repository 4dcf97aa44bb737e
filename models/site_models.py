# models/site_models.py

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from models.base_models import ResultModel


class PageMeta(ResultModel):
    """
    <head> から取り出したメタ情報。
    取れなかった項目は None（空文字は None に寄せる）。
    """

    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    canonical: Optional[str] = None


class PageContent(ResultModel):
    """
    1ページ分の構造情報（フラットなレコード）。
    html_parser.parse_html() が生成し、以降のエージェントは読むだけ。
    """

    meta: PageMeta = Field(default_factory=PageMeta)

    # h1〜h3 のテキストを出現順に保持
    headings: List[str] = Field(default_factory=list)

    # 空白を潰した本文テキスト（先頭 5000 文字まで）
    content_text: str = ""

    # 本文から検出した質問文
    page_questions: List[str] = Field(default_factory=list)
