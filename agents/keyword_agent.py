# agents/keyword_agent.py

from __future__ import annotations

import logging
from collections import Counter
from typing import List, Optional, Sequence

from models.keyword_models import SeedKeyword
from models.lexicon_models import Lexicon
from models.site_models import PageMeta
from services.text_normalizer import normalize_and_tokenize

logger = logging.getLogger(__name__)

# ============================================================
# パラメータ
# ============================================================

# 返す seed キーワードの最大数
MAX_SEED_KEYWORDS = 10

# 本文は先頭だけ使う（メタ・見出しの比重を上げるため）
MAX_BODY_CHARS = 800


def _collect_text(meta: PageMeta, headings: Sequence[str], content_text: str) -> str:
    """title → og:title → description → og:description → 見出し → 本文先頭 の順で連結する。"""
    parts: List[str] = []

    for value in (meta.title, meta.og_title, meta.description, meta.og_description):
        if value:
            parts.append(value)

    parts.extend(headings)

    if content_text:
        parts.append(content_text[:MAX_BODY_CHARS])

    return " ".join(parts)


def extract_seed_keywords(
    meta: PageMeta,
    headings: Sequence[str],
    content_text: str,
    lexicon: Optional[Lexicon] = None,
) -> List[SeedKeyword]:
    """
    メタ情報・見出し・本文から頻度ベースで seed キーワードを抽出する。

    - 出現回数の多い順（同数なら先に出た方が上）に最大 10 件
    - score は先頭（最頻出）の出現回数を 1.0 とした相対値
    """
    raw_text = _collect_text(meta, headings, content_text)
    if not raw_text.strip():
        return []

    tokens = normalize_and_tokenize(raw_text, lexicon)
    if not tokens:
        return []

    # Counter.most_common は同数のとき初出順を保つ
    top_entries = Counter(tokens).most_common(MAX_SEED_KEYWORDS)
    max_count = top_entries[0][1] if top_entries else 1

    keywords = [SeedKeyword(value=token, score=count / max_count) for token, count in top_entries]

    logger.info(
        "[keyword_agent] tokens=%s distinct=%s seeds=%s",
        len(tokens),
        len(set(tokens)),
        [k.value for k in keywords],
    )
    return keywords
